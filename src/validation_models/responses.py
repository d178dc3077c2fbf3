"""JSON responses for validated models."""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Tuple

from flask import jsonify


def _split_param(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def requested_selectors(
    args: Mapping[str, str],
    fields_param: str = "fields",
    expand_param: str = "expand",
) -> Tuple[List[str], List[str]]:
    """Parse the comma-separated ``fields`` and ``expand`` query parameters.

    ``args`` is usually ``request.args``. Missing or empty parameters give
    empty lists.
    """

    return _split_param(args.get(fields_param)), _split_param(args.get(expand_param))


class ResponseMixin:
    """Response helpers for models that validate and serialize themselves."""

    def respond_json(self, fields: Sequence[str] = (), expand: Sequence[str] = ()):
        """Return ``(response, status)`` for a Flask view.

        A model with errors produces a 422 carrying the first message and the
        per-attribute messages; otherwise the projected model with a 200.
        """

        if self.has_errors():
            return (
                jsonify({
                    "message": self.get_first_error(),
                    "fields": self.get_error_messages(),
                }),
                422,
            )
        return jsonify(self.to_dict(fields, expand)), 200

    def respond_no_content(self):
        return "", 204
