"""
Supabase Exercise Instance Repository Implementation.

This module implements the ExerciseInstanceRepository protocol using Supabase.
Instances live in exercicios_treino_usuario and are joined with their owning
workout (treinos_usuario) to filter by program enrollment. Logged sets are
read through the get_series_by_exercise RPC.
"""
from typing import Optional, List, Dict, Any
import logging

from supabase import Client

from domain.exceptions import StoreError
from domain.models.chain_identity import ChainIdentity

logger = logging.getLogger(__name__)

INSTANCES_TABLE = "exercicios_treino_usuario"
SETS_RPC = "get_series_by_exercise"

# Owning workout; !inner turns the embed into a filterable join
WORKOUT_EMBED = "treinos_usuario(programa_usuario_id, created_at)"
WORKOUT_JOIN = "treinos_usuario!inner(programa_usuario_id, created_at)"
PROGRAM_FILTER = "treinos_usuario.programa_usuario_id"


def _workout_created_at(row: Dict[str, Any]) -> str:
    workout = row.get("treinos_usuario") or {}
    if isinstance(workout, list):
        workout = workout[0] if workout else {}
    return workout.get("created_at") or ""


def _pending_order(row: Dict[str, Any]) -> tuple:
    created_at = _workout_created_at(row)
    return (created_at == "", created_at, str(row.get("id")))


class SupabaseExerciseInstanceRepository:
    """
    Supabase implementation of ExerciseInstanceRepository.

    Every failed call is logged and re-raised as StoreError so the engine can
    tell "not found" apart from "could not ask".
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def get(self, instance_id: str) -> Optional[Dict[str, Any]]:
        """Get a single instance with its owning workout."""
        try:
            result = self._client.table(INSTANCES_TABLE) \
                .select(f"*, {WORKOUT_EMBED}") \
                .eq("id", instance_id) \
                .limit(1) \
                .execute()
        except Exception as e:
            logger.exception(f"Error fetching exercise instance {instance_id}: {e}")
            raise StoreError(f"Could not fetch instance {instance_id}") from e

        return result.data[0] if result.data else None

    def update(self, instance_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Partially update an instance."""
        try:
            result = self._client.table(INSTANCES_TABLE) \
                .update(fields) \
                .eq("id", instance_id) \
                .execute()
        except Exception as e:
            logger.exception(f"Error updating exercise instance {instance_id}: {e}")
            raise StoreError(f"Could not update instance {instance_id}") from e

        return result.data[0] if result.data else None

    def update_many(self, instance_ids: List[str], fields: Dict[str, Any]) -> int:
        """Apply the same partial update to several instances."""
        if not instance_ids:
            return 0
        try:
            result = self._client.table(INSTANCES_TABLE) \
                .update(fields) \
                .in_("id", list(instance_ids)) \
                .execute()
        except Exception as e:
            logger.exception(f"Error updating {len(instance_ids)} exercise instances: {e}")
            raise StoreError("Could not update instances") from e

        return len(result.data or [])

    def get_sets(self, instance_id: str) -> List[Dict[str, Any]]:
        """Get logged sets of an instance via RPC."""
        try:
            result = self._client.rpc(SETS_RPC, {"exercise_id": instance_id}).execute()
        except Exception as e:
            logger.exception(f"Error fetching sets of instance {instance_id}: {e}")
            raise StoreError(f"Could not fetch sets of {instance_id}") from e

        return result.data or []

    def list_pending_in_chain(
        self,
        chain: ChainIdentity,
        program_id: str,
    ) -> List[Dict[str, Any]]:
        """
        List pending instances of a chain in an enrollment.

        PostgREST cannot order the parent rows by an embedded column, so rows
        are sorted here by workout created_at, then id.
        """
        try:
            result = self._client.table(INSTANCES_TABLE) \
                .select(f"*, {WORKOUT_JOIN}") \
                .eq(chain.column, chain.value) \
                .eq("concluido", False) \
                .eq(PROGRAM_FILTER, program_id) \
                .execute()
        except Exception as e:
            logger.exception(f"Error listing pending instances of {chain}: {e}")
            raise StoreError(f"Could not list pending instances of {chain}") from e

        return sorted(result.data or [], key=_pending_order)

    def list_completed_in_chain(
        self,
        chain: ChainIdentity,
        program_id: str,
        *,
        exclude_instance_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """List completed instances of a chain, most recently updated first."""
        try:
            query = self._client.table(INSTANCES_TABLE) \
                .select(f"*, {WORKOUT_JOIN}") \
                .eq(chain.column, chain.value) \
                .eq("concluido", True) \
                .eq(PROGRAM_FILTER, program_id)

            if exclude_instance_id:
                query = query.neq("id", exclude_instance_id)

            query = query.order("updated_at", desc=True)
            if limit:
                query = query.limit(limit)

            result = query.execute()
        except Exception as e:
            logger.exception(f"Error listing completed instances of {chain}: {e}")
            raise StoreError(f"Could not list completed instances of {chain}") from e

        return result.data or []

    def find_chain_increment(
        self,
        chain: ChainIdentity,
        program_id: str,
    ) -> Optional[float]:
        """Find an increment configured on any instance of the chain."""
        try:
            result = self._client.table(INSTANCES_TABLE) \
                .select("incremento_minimo, treinos_usuario!inner(programa_usuario_id)") \
                .eq(chain.column, chain.value) \
                .eq(PROGRAM_FILTER, program_id) \
                .not_.is_("incremento_minimo", "null") \
                .limit(1) \
                .execute()
        except Exception as e:
            logger.exception(f"Error fetching chain increment of {chain}: {e}")
            raise StoreError(f"Could not fetch chain increment of {chain}") from e

        if not result.data:
            return None
        value = result.data[0].get("incremento_minimo")
        return float(value) if value else None
