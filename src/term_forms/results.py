"""
Results returned by a dialog invocation.

However the input loop ends, the caller receives one of three result types,
built from the control that ended it:

* :class:`ActionResult` for buttons carrying an action name (``Cancel``,
  ``Validate``, ``Back``...), with the callable as ``value`` when the button
  also carries one
* :class:`ValueResult` for buttons carrying a plain value
* :class:`ScriptblockResult` for buttons carrying only a callable
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Union

from .controls import Button, ButtonActivation

if TYPE_CHECKING:
    from .dialog import Dialog

CANCEL_ACTIONS = ('Cancel', 'Exit')


@dataclass
class DialogSnapshot:
    """State captured when the terminal control was activated."""
    control: Button
    dialog: 'Dialog'
    form_is_valid: bool


@dataclass
class ActionResult:
    name: str
    snapshot: DialogSnapshot
    value: Any = None
    depth: Optional[int] = field(default=None)

    def __post_init__(self):
        if self.name == 'Back' and self.depth is None:
            self.depth = 0

    @property
    def is_cancel(self) -> bool:
        return self.name in CANCEL_ACTIONS


@dataclass
class ValueResult:
    value: Any
    snapshot: DialogSnapshot
    selected_properties: Optional[List[str]] = None


@dataclass
class ScriptblockResult:
    callable: Callable
    snapshot: DialogSnapshot

    def run(self, *args, **kwargs):
        return self.callable(*args, **kwargs)


Result = Union[ActionResult, ValueResult, ScriptblockResult]


def build_result(control: Button, dialog: 'Dialog') -> Result:
    """Wrap the control that ended the input loop into a result."""
    snapshot = DialogSnapshot(control, dialog, dialog.is_valid_form())
    match control.activation_kind:
        case ButtonActivation.ACTION:
            return ActionResult(control.action, snapshot, value=control.value)
        case ButtonActivation.ACTION_SCRIPTBLOCK:
            return ActionResult(control.action, snapshot, value=control.scriptblock)
        case ButtonActivation.SCRIPTBLOCK:
            return ScriptblockResult(control.scriptblock, snapshot)
        case _:
            return ValueResult(control.value, snapshot, dialog.selected_properties)
