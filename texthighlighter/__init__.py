"""
TextHighlighter - highlight and underline characters of Qt text widgets.

Annotations are rendered into an off-screen canvas that is installed as
the widget background, so the text itself is never modified.

- core: Colors, pixel canvas, drawing primitives, host geometry interfaces
- editor: Annotation store, substring resolution, highlight engine
- ui: Qt host adapters and the demo window
- services: Application services (config, logging)
"""

__version__ = "0.1.0"
