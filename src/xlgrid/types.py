from __future__ import annotations

from typing import Literal

CellValueKind = Literal["string", "number", "shared_string", "boolean", "date"]
BorderSide = Literal["left", "right", "top", "bottom"]
BorderStyleType = Literal[
    "dashDot",
    "dashDotDot",
    "dashed",
    "dotted",
    "double",
    "hair",
    "medium",
    "mediumDashDot",
    "mediumDashDotDot",
    "mediumDashed",
    "slantDashDot",
    "thick",
    "thin",
]
FillPatternType = Literal["none", "gray125", "solid"]
HorizontalAlignType = Literal[
    "general",
    "left",
    "center",
    "right",
    "fill",
    "justify",
    "centerContinuous",
    "distributed",
]
OrientationType = Literal["default", "portrait", "landscape"]
