"""Server-side SVG chart of a player's rating history.

Uses Figure() directly (not pyplot) for thread safety in Flask threaded mode.
"""
import io
import logging

from matplotlib.figure import Figure
from matplotlib.backends.backend_svg import FigureCanvasSVG

from engine.rank import RANKS

logger = logging.getLogger(__name__)

RESULT_COLORS = {'win': '#2e7d32', 'draw': '#757575', 'loss': '#c62828'}


def _tier_floors(low, high):
    """(min_elo, tier) for each tier whose floor falls inside [low, high]."""
    floors = []
    seen = set()
    for rank in RANKS:
        if rank['overflow'] or rank['tier'] in seen:
            continue
        seen.add(rank['tier'])
        if low <= rank['min_elo'] <= high:
            floors.append((rank['min_elo'], rank['tier']))
    return floors


def render_rating_chart(history, width=6.0, height=3.0):
    """Render rating history entries (oldest first) to SVG bytes."""
    fig = Figure(figsize=(width, height))
    FigureCanvasSVG(fig)
    ax = fig.add_subplot(1, 1, 1)

    if not history:
        ax.text(0.5, 0.5, 'No games played yet', ha='center', va='center',
                transform=ax.transAxes)
        ax.set_axis_off()
    else:
        games = list(range(1, len(history) + 1))
        ratings = [entry['rating'] for entry in history]
        ax.plot(games, ratings, color='#1565c0', linewidth=1.5)
        ax.scatter(games, ratings, s=14, zorder=3,
                   c=[RESULT_COLORS.get(e.get('result'), '#1565c0') for e in history])

        low, high = min(ratings), max(ratings)
        for floor, tier in _tier_floors(low - 100, high + 100):
            ax.axhline(floor, color='#bdbdbd', linestyle='--', linewidth=0.8)
            ax.text(games[0], floor, f' {tier}', fontsize=7, va='bottom', color='#616161')

        ax.set_xlabel('Game')
        ax.set_ylabel('Rating')
        ax.margins(x=0.02, y=0.15)
        ax.grid(axis='y', alpha=0.2)

    fig.tight_layout()
    buf = io.BytesIO()
    fig.savefig(buf, format='svg', transparent=True)
    logger.debug('Rendered rating chart for %d games', len(history or []))
    return buf.getvalue()
