"""
Guided attribute-selection chain.

Walks a user through a fixed, ordered list of attribute pickers. The chain
opens a step through an injected navigator, then waits for the screen that
hosts it to resume. Only a resume that follows a chain-initiated open
(the chain is "armed") advances to the next step; any other resume, such
as the first mount of the host screen, is ignored.

States:
    IDLE             no chain running
    ACTIVE           a step is open but the chain is not armed (navigator failed)
    AWAITING_RESUME  a step was opened by the chain; next resume advances
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple

from core.logging import LoggerMixin
from facets.models import Dimension


VENDOR_STEPS: Tuple[Dimension, ...] = (
    Dimension.DRESS_TYPE,
    Dimension.FABRIC,
    Dimension.COLOR,
    Dimension.WORK,
    Dimension.WORK_DENSITY,
    Dimension.ORIGIN_CITY,
    Dimension.WEAR_STATE,
)

BUYER_STEPS: Tuple[Dimension, ...] = VENDOR_STEPS + (Dimension.PRICE_BAND,)


class ChainState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    AWAITING_RESUME = "awaiting_resume"


@dataclass(frozen=True)
class OpenStep:
    """Instruction for the navigator: show the picker for ``step``."""
    step: Dimension
    index: int


Navigator = Callable[[OpenStep], None]


class GuidedChain(LoggerMixin):
    """
    Sequential step machine over a fixed list of dimensions.

    Usage:
        chain = GuidedChain(VENDOR_STEPS, navigator=open_picker)
        chain.start(Dimension.DRESS_TYPE)   # opens step 0, armed
        chain.on_resume()                   # picker closed -> opens step 1
    """

    def __init__(
        self,
        steps: Sequence[Dimension] = VENDOR_STEPS,
        navigator: Optional[Navigator] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        steps = tuple(Dimension(step) for step in steps)
        if not steps:
            raise ValueError("GuidedChain needs at least one step")
        if len(set(steps)) != len(steps):
            raise ValueError("GuidedChain steps must be unique")

        self._steps = steps
        self._navigator = navigator
        self._on_complete = on_complete
        self._state = ChainState.IDLE
        self._index: Optional[int] = None
        self._armed = False

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def steps(self) -> Tuple[Dimension, ...]:
        return self._steps

    @property
    def state(self) -> ChainState:
        return self._state

    @property
    def step_index(self) -> Optional[int]:
        return self._index

    @property
    def current_step(self) -> Optional[Dimension]:
        return None if self._index is None else self._steps[self._index]

    @property
    def is_armed(self) -> bool:
        return self._armed

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def start(self, from_step: Optional[Dimension] = None) -> Optional[OpenStep]:
        """
        Start (or restart) the chain at ``from_step`` (default: first step).

        Returns:
            The OpenStep sent to the navigator, or None if navigation failed
            (the chain then stalls in ACTIVE until started again)

        Raises:
            ValueError: If the step is not part of this chain
        """
        step = self._steps[0] if from_step is None else Dimension(from_step)
        if step not in self._steps:
            raise ValueError(f"{step.value} is not a step of this chain")
        self.logger.debug("Guided chain started", step=step.value)
        return self._open(self._steps.index(step))

    def on_resume(self) -> Optional[OpenStep]:
        """
        Handle the host screen regaining focus.

        Returns:
            The next OpenStep if the chain advanced, otherwise None (also
            when the navigator failed to open the next step)
        """
        if not self._armed:
            return None
        self._armed = False

        next_index = self._index + 1
        if next_index < len(self._steps):
            return self._open(next_index)

        self.logger.debug("Guided chain complete", steps=len(self._steps))
        self._state = ChainState.IDLE
        self._index = None
        if self._on_complete is not None:
            self._on_complete()
        return None

    def cancel(self) -> None:
        """Abandon the chain without opening anything."""
        self._state = ChainState.IDLE
        self._index = None
        self._armed = False

    def _open(self, index: int) -> Optional[OpenStep]:
        event = OpenStep(step=self._steps[index], index=index)
        self._index = index
        self._state = ChainState.AWAITING_RESUME
        self._armed = True

        if self._navigator is not None:
            try:
                self._navigator(event)
            except Exception as e:
                # Step stays open but unarmed until the user starts again
                self._armed = False
                self._state = ChainState.ACTIVE
                self.logger.warning(
                    "Guided chain navigation failed",
                    step=event.step.value,
                    error=str(e),
                )
                return None

        return event
