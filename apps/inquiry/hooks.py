# apps/inquiry/hooks.py
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Union

from django.conf import settings
from django.utils.module_loading import import_string

# Extension points, in the order a submission meets them.
PRE_CREATE = "pre_create"  # fn(draft: SubmissionDraft, *, raw: Mapping) -> SubmissionDraft
PRE_SEND = "pre_send"  # fn(mail: OutgoingMail, *, kind: str, inquiry) -> OutgoingMail
EXTENSION_POINTS = (PRE_CREATE, PRE_SEND)

Hook = Callable[..., Any]


class HookPipeline:
    """
    Ordered, explicit transform callbacks. Each hook receives the current
    value plus keyword context and must return the (possibly new) value.
    """

    def __init__(self, hooks: Mapping[str, Iterable[Union[Hook, str]]] | None = None):
        self._hooks: Dict[str, List[Hook]] = {point: [] for point in EXTENSION_POINTS}
        for point, fns in (hooks or {}).items():
            for fn in fns:
                self.register(point, fn)

    @classmethod
    def from_settings(cls) -> "HookPipeline":
        return cls(getattr(settings, "INQUIRY_HOOKS", {}) or {})

    def register(self, point: str, fn: Union[Hook, str]) -> "HookPipeline":
        if point not in self._hooks:
            raise ValueError(f"Unknown extension point: {point!r}")
        if isinstance(fn, str):
            fn = import_string(fn)
        self._hooks[point].append(fn)
        return self

    def hooks_for(self, point: str) -> tuple:
        return tuple(self._hooks.get(point, ()))

    def run(self, point: str, value, **context):
        for fn in self._hooks[point]:
            result = fn(value, **context)
            if result is None:
                raise TypeError(f"Hook {fn!r} at {point!r} returned None; hooks must return the value.")
            value = result
        return value
