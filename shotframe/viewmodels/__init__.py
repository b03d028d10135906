"""ViewModel package for UI state and command surfaces.

Call context:
    ``shotframe/app/main.py`` and any GUI shell import concrete view models
    from this package to bind view callbacks to state transitions.

Responsibilities:
    - Expose mutable UI state and command intent callbacks.
    - Turn pipeline errors into user-facing alerts.
    - Keep MVVM boundaries explicit by avoiding image or persistence logic.
"""
