"""
Service de suggestion de stations / Station suggestion service.
Liste de base + stations recentes, classees par frequence.
Base list + recent stations, ranked by frequency.
"""

from collections import Counter
from typing import Iterable


class StationService:
    """Classement des stations pour le formulaire / Station ranking for the entry form."""

    @staticmethod
    def rank_stations(
        base: Iterable[str],
        recent_names: Iterable[str | None],
        top_n: int = 3,
    ) -> tuple[list[str], list[str]]:
        """Retourne (top, reste) / Returns (top, rest).

        top: les top_n plus frequentes (frequence > 0), egalites par ordre alphabetique.
        top: the top_n most frequent (frequency > 0), ties broken alphabetically.
        reste / rest: toutes les autres, ordre alphabetique / all others, alphabetical.
        """
        recent = [name for name in recent_names if name]
        freq = Counter(recent)

        all_stations: list[str] = []
        for name in [*base, *recent]:
            if name and name not in all_stations:
                all_stations.append(name)

        by_freq = sorted(all_stations, key=lambda s: (-freq[s], s.casefold()))
        top = [s for s in by_freq if freq[s] > 0][:top_n]
        rest = sorted((s for s in all_stations if s not in top), key=str.casefold)
        return top, rest
