"""Competitive rank ladder derived from an ELO rating.

Tiers Iron..Diamond have four divisions each (IV lowest). Iron IV spans
[0, 640); every later division spans 320 rating points, so Diamond I ends
at 8000. Master, Grandmaster and Challenger are single
divisions. Intervals are half-open [min_elo, max_elo) and partition
[0, 16000); anything at or above 16000 is Challenger "overflow".
"""
import logging

logger = logging.getLogger(__name__)

DIVISION_WIDTH = 320
FIRST_DIVISION_WIDTH = 2 * DIVISION_WIDTH
TABLE_MAX = 16000

OVERFLOW_ICON = '🌠'
OVERFLOW_SUFFIX = '+'

# (tier, color, border_color, icon, descriptions for IV..I)
_DIVIDED_TIERS = [
    ('Iron', '#8B4513', '#654321', '⚔️',
     ['Starting your journey', 'Learning the basics',
      'Building foundations', 'Ready to advance']),
    ('Bronze', '#CD7F32', '#8B4513', '🥉',
     ['Bronze foundations', 'Steady progress', 'Improving skills', 'Bronze mastery']),
    ('Silver', '#C0C0C0', '#A9A9A9', '🥈',
     ['Silver precision', 'Refined technique', 'Silver excellence', 'Silver mastery']),
    ('Gold', '#FFD700', '#DAA520', '🥇',
     ['Golden potential', 'Gold standard', 'Gold excellence', 'Gold mastery']),
    ('Platinum', '#00CED1', '#008B8B', '💎',
     ['Platinum precision', 'Platinum skill', 'Platinum excellence', 'Platinum mastery']),
    ('Diamond', '#B9F2FF', '#4682B4', '💠',
     ['Diamond brilliance', 'Diamond expertise', 'Diamond excellence', 'Diamond mastery']),
]

_APEX_TIERS = [
    ('Master', 8000, 9600, '#8A2BE2', '#4B0082', '👑', 'Master level'),
    ('Grandmaster', 9600, 11200, '#FF4500', '#DC143C', '🏆', 'Grandmaster elite'),
    ('Challenger', 11200, TABLE_MAX, '#FFD700', '#DAA520', '🌟', 'Challenger legend'),
]

DIVISIONS = ('IV', 'III', 'II', 'I')


def _build_ranks():
    ranks = []
    floor = 0
    for tier, color, border, icon, descriptions in _DIVIDED_TIERS:
        for division, description in zip(DIVISIONS, descriptions):
            width = FIRST_DIVISION_WIDTH if not ranks else DIVISION_WIDTH
            ranks.append(_rank(tier, division, floor, floor + width,
                               color, border, icon, description))
            floor += width
    for tier, lo, hi, color, border, icon, description in _APEX_TIERS:
        ranks.append(_rank(tier, '', lo, hi, color, border, icon, description))
    return tuple(ranks)


def _rank(tier, division, min_elo, max_elo, color, border, icon, description):
    label = f'{tier} {division}' if division else tier
    return {
        'tier': tier,
        'division': division,
        'label': label,
        'min_elo': min_elo,
        'max_elo': max_elo,
        'color': color,
        'border_color': border,
        'icon': icon,
        'description': description,
        'overflow': False,
    }


RANKS = _build_ranks()


def rank_for_rating(rating):
    """Return the rank whose [min_elo, max_elo) contains rating.

    Never raises for numeric input: negative ratings resolve to the bottom
    division, ratings at or above the table maximum to an overflow copy of
    the top tier.
    """
    if rating < RANKS[0]['min_elo']:
        return dict(RANKS[0])
    for rank in RANKS:
        if rank['min_elo'] <= rating < rank['max_elo']:
            return dict(rank)
    top = dict(RANKS[-1])
    top['overflow'] = True
    top['label'] = top['label'] + OVERFLOW_SUFFIX
    top['icon'] = OVERFLOW_ICON
    return top


def next_rank(rating):
    """Rank above the one holding rating, or None at the top."""
    current = rank_for_rating(rating)
    if current['overflow']:
        return None
    for rank in RANKS:
        if rank['min_elo'] > current['min_elo']:
            return dict(rank)
    return None


def rank_display(rating, rating_change=0):
    """Rank summary for a rating plus the LP echo of the last change.

    current_lp is the position inside the current division scaled to 0-100;
    progress_to_next interpolates between this floor and the next floor.
    """
    current = rank_for_rating(rating)
    upcoming = next_rank(rating)

    span = current['max_elo'] - current['min_elo']
    current_lp = round((rating - current['min_elo']) / span * 100)
    current_lp = max(0, min(100, current_lp))

    if upcoming is None:
        progress = 100.0
    else:
        progress = (rating - current['min_elo']) / (upcoming['min_elo'] - current['min_elo']) * 100
        progress = max(0.0, min(100.0, progress))

    lp_gain = round(rating_change)
    return {
        'current_rank': current,
        'lp_gain': lp_gain,
        'lp_gain_text': lp_change_text(lp_gain),
        'current_lp': current_lp,
        'next_rank': upcoming,
        'progress_to_next': progress,
    }


def lp_change_text(lp_gain):
    if lp_gain > 0:
        return f'+{lp_gain} LP'
    if lp_gain < 0:
        return f'{lp_gain} LP'
    return '0 LP'
