from __future__ import annotations
import re

from .base import PatternPlugin


class FlutterTextPlugin(PatternPlugin):
    NAME = "flutter"
    EXTENSIONS = ["dart"]
    # Text("literal" ...) not followed on the same line by a loc...( call.
    # Multi-line arguments, escaped quotes and interpolation are not handled.
    REGEX = re.compile(r"""Text\(\s*["']([^"']+)["'](?!.*\bloc\S*\()(?:\s*,.*)?\)""")

