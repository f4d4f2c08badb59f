"""
Exercise Instance Repository Interface (Port).

This module defines the abstract interface the progression engine uses to
read and write exercise instances of program enrollments and their logged
sets. Implementations live in infrastructure/db (Supabase) and tests/fakes
(in-memory).

All methods raise StoreError when the backing store call fails. "Not found"
is not a failure: get() returns None and list queries return [].
"""
from typing import Protocol, Optional, List, Dict, Any

from domain.models.chain_identity import ChainIdentity


class ExerciseInstanceRepository(Protocol):
    """
    Abstract interface for exercise instance data access.

    Rows are plain dicts with exercicios_treino_usuario columns. Rows returned
    by get() and the chain queries also carry the owning workout under the
    "treinos_usuario" key ({"programa_usuario_id", "created_at"}).
    """

    def get(self, instance_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a single instance by ID.

        Args:
            instance_id: Instance UUID

        Returns:
            Instance row or None if not found
        """
        ...

    def update(self, instance_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Partially update an instance; only the supplied fields change.

        Args:
            instance_id: Instance UUID
            fields: Column -> value mapping

        Returns:
            Updated row or None if the instance does not exist
        """
        ...

    def update_many(self, instance_ids: List[str], fields: Dict[str, Any]) -> int:
        """
        Apply the same partial update to several instances.

        Args:
            instance_ids: Instance UUIDs
            fields: Column -> value mapping

        Returns:
            Number of rows updated
        """
        ...

    def get_sets(self, instance_id: str) -> List[Dict[str, Any]]:
        """
        Get the logged sets of an instance.

        Returns:
            Set rows (numero_serie, peso, repeticoes, concluida)
        """
        ...

    def list_pending_in_chain(
        self,
        chain: ChainIdentity,
        program_id: str,
    ) -> List[Dict[str, Any]]:
        """
        List not-yet-completed instances of a chain within an enrollment.

        Ordered by the owning workout's created_at ascending, then by
        instance id ascending.

        Args:
            chain: Chain identity (must be chainable)
            program_id: Program enrollment ID (programa_usuario_id)

        Returns:
            Instance rows, earliest first
        """
        ...

    def list_completed_in_chain(
        self,
        chain: ChainIdentity,
        program_id: str,
        *,
        exclude_instance_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        List completed instances of a chain within an enrollment.

        Ordered by updated_at descending (most recently completed first).

        Args:
            chain: Chain identity (must be chainable)
            program_id: Program enrollment ID
            exclude_instance_id: Instance to leave out (usually the current one)
            limit: Maximum rows to return

        Returns:
            Instance rows, most recent first
        """
        ...

    def find_chain_increment(
        self,
        chain: ChainIdentity,
        program_id: str,
    ) -> Optional[float]:
        """
        Find a minimum increment configured on any instance of the chain.

        Returns:
            The increment, or None when no instance has one
        """
        ...
