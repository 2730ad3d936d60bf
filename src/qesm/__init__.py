"""
Questionnaire Editing State Machine (QESM) Package

The in-memory core of a multi-lingual, multi-channel questionnaire editor.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Network transport
    - Server-side storage formats
    - Rendering / UI widgets

It defines the questionnaire document, the operations that edit it, the
reducer that applies them, the validator that annotates the result and
the projections collaborators derive from it.

All IO happens in external layers that talk to EditorSession.
"""

__version__ = "0.1.0"
