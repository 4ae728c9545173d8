from livebracket.utils.logging import logger
from livebracket.utils.types import EnumAutoStr


class DrawHandling(EnumAutoStr):
    REPLAY = "replay"
    BOTH_ADVANCE = "both-advance"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: "str | DrawHandling | None") -> "DrawHandling":
        if isinstance(value, DrawHandling):
            return value
        if value is None or value.strip() == "":
            return DrawHandling.REPLAY
        try:
            return DrawHandling(value.strip().lower())
        except ValueError:
            logger.warning(f"Unknown draw handling method: {value} - defaulting to replay")
            return DrawHandling.REPLAY


DRAW_MESSAGES: dict[DrawHandling, str] = {
    DrawHandling.REPLAY: "Match ended in a draw. Please replay the match.",
    DrawHandling.BOTH_ADVANCE: "Match ended in a draw. Both players advance to the next round.",
    DrawHandling.RANDOM: "Match ended in a draw. Winner selected randomly.",
}

DRAW_EVENT_LABELS: dict[DrawHandling, str] = {
    DrawHandling.REPLAY: "Draw - Replay Required",
    DrawHandling.BOTH_ADVANCE: "Draw - Both Advance",
}
