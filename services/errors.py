# -*- coding: utf-8 -*-
"""services/errors.py

Errors raised at the service boundary (no PyQt dependency).

Electrically questionable data never raises; it is reported as
core.types.Issue warnings. Only input that cannot be read as a project
at all is an exception.
"""

from __future__ import annotations


class ProjectFormatError(TypeError):
    """The object handed to the engine is neither a Project nor a project mapping."""

    def __init__(self, obj: object) -> None:
        super().__init__(f"Expected a Project or a project mapping, got {type(obj).__name__}.")
        self.obj = obj
