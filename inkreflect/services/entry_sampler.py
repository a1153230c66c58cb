"""
Weighted stratified sampling of oversized entry corpora.
"""

from inkreflect.models.journal import JournalEntry

EMOTIONAL_WORDS = (
    "love",
    "hate",
    "amazing",
    "terrible",
    "wonderful",
    "awful",
    "excited",
    "depressed",
    "anxious",
    "peaceful",
    "angry",
    "happy",
    "sad",
    "frustrated",
    "grateful",
    "blessed",
    "worried",
    "scared",
)

RECENT_SHARE = 0.4
INTENSITY_SHARE = 0.3
DETAIL_SHARE = 0.2


def estimate_emotional_intensity(entry: JournalEntry) -> float:
    """
    Heuristic [0, 1] score of how emotionally charged an entry's body is.

    Used only to prioritize sampling.
    """
    text = entry.content.lower()

    intensity = 0.1 * sum(1 for word in EMOTIONAL_WORDS if word in text)
    intensity += text.count("!") * 0.05
    intensity += text.count("?") * 0.03
    intensity += min(0.2, len(text) / 5000)

    return max(0.0, min(1.0, intensity))


class EntrySampler:
    """
    Reduces a large corpus to a bounded, diverse subset.

    Stages, each skipping entries already picked and stopping once the
    target is reached:
    1. 40% most recent
    2. 30% highest emotional intensity
    3. 20% longest bodies
    4. Remaining slots spread evenly across the corpus

    Sorting is stable, so ties keep input order and the result is
    deterministic for a given input.
    """

    def __init__(self, threshold: int = 50, target: int = 40):
        """
        Args:
            threshold: Corpora larger than this are sampled
            target: Maximum size of a sampled corpus
        """
        self.threshold = threshold
        self.target = target

    def should_sample(self, entries: list[JournalEntry]) -> bool:
        return len(entries) > self.threshold

    def sample(self, entries: list[JournalEntry]) -> list[JournalEntry]:
        """
        Select entries to process.

        Args:
            entries: Full corpus

        Returns:
            Selected entries sorted by creation time, oldest first. Corpora at
            or below the threshold are returned whole.
        """
        if not self.should_sample(entries) or len(entries) <= self.target:
            return sorted(entries, key=lambda entry: entry.created_at)

        target = self.target
        selected: list[JournalEntry] = []
        selected_ids: set[str] = set()

        def take(candidates: list[JournalEntry], quota: int) -> None:
            taken = 0
            for entry in candidates:
                if taken >= quota or len(selected) >= target:
                    return
                if entry.id in selected_ids:
                    continue
                selected_ids.add(entry.id)
                selected.append(entry)
                taken += 1

        by_recency = sorted(entries, key=lambda entry: entry.created_at, reverse=True)
        take(by_recency, int(target * RECENT_SHARE))

        by_intensity = sorted(entries, key=estimate_emotional_intensity, reverse=True)
        take(by_intensity, int(target * INTENSITY_SHARE))

        by_detail = sorted(entries, key=lambda entry: len(entry.content), reverse=True)
        take(by_detail, int(target * DETAIL_SHARE))

        remaining = target - len(selected)
        if remaining > 0:
            chronological = sorted(entries, key=lambda entry: entry.created_at)
            stride = max(1, len(chronological) // remaining)
            take(chronological[::stride], remaining)

        return sorted(selected, key=lambda entry: entry.created_at)
