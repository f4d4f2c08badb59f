"""
Application Layer for the progression engine.

This package contains:
- ports/: Abstract repository interfaces (what the domain needs)
- use_cases/: Use cases coordinating progression workflows
- result.py: StepResult, the success/failure value carried between steps
"""
