"""Natural-language profile summary.

Each clause is rendered only when its data is present, so the text never
carries placeholders for missing fields.

Activity hours and weekdays are read on the UTC clock unless a ``tz`` is given.
"""

from collections import Counter
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

from ..graph.nodes import utcnow
from ..models.behavior import ProfileBehavior
from ..models.preference import ProfilePreference, is_disliked, is_liked
from ..models.profile import UserProfile

NO_PROFILE_SUMMARY = "No profile data is available for this user yet."

MAX_LIKED = 5
MAX_DISLIKED = 3
MAX_RESTAURANTS = 3
MAX_SEARCHES = 3
MIN_BEHAVIORS_FOR_PATTERNS = 6

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _join(items: list[str]) -> str:
    """Join as "a", "a and b" or "a, b and c"."""
    if len(items) < 2:
        return "".join(items)
    return f"{', '.join(items[:-1])} and {items[-1]}"


def format_hour(hour: int) -> str:
    """24-hour clock hour as "9 AM" / "12 PM"."""
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12} {suffix}"


def top_liked(preferences: list[ProfilePreference], limit: int = MAX_LIKED) -> list[ProfilePreference]:
    """Highest-weight liked foods; equal weights keep their input order."""
    liked = [p for p in preferences if is_liked(p)]
    return sorted(liked, key=lambda p: p.weight, reverse=True)[:limit]


def top_disliked(preferences: list[ProfilePreference], limit: int = MAX_DISLIKED) -> list[ProfilePreference]:
    """Strongest dislikes first; equal weights keep their input order."""
    disliked = [p for p in preferences if is_disliked(p)]
    return sorted(disliked, key=lambda p: p.weight)[:limit]


def _identity_clause(profile: UserProfile) -> Optional[str]:
    user = profile.user
    facts = []
    if user.age is not None:
        facts.append(f"is {user.age} years old")
    if user.location:
        facts.append(f"lives in {user.location}")

    if facts:
        return f"{user.name or 'This user'} {' and '.join(facts)}."
    if user.name:
        return f"This is {user.name}."
    return None


def _diet_clause(profile: UserProfile) -> Optional[str]:
    if not profile.diet_types:
        return None
    noun = "diet" if len(profile.diet_types) == 1 else "diets"
    return f"Follows a {_join(profile.diet_types)} {noun}."


def _liked_clause(profile: UserProfile) -> Optional[str]:
    liked = top_liked(profile.preferences)
    if not liked:
        return None
    return f"Particularly enjoys {', '.join(p.value for p in liked)}."


def _disliked_clause(profile: UserProfile) -> Optional[str]:
    disliked = top_disliked(profile.preferences)
    if not disliked:
        return None
    return f"Dislikes {', '.join(p.value for p in disliked)}."


def _restrictions_clause(profile: UserProfile) -> Optional[str]:
    restrictions = [f"{p.category}: {p.value}" for p in profile.preferences if p.type == "dietary"]
    if not restrictions:
        return None
    return f"Dietary restrictions: {', '.join(restrictions)}."


def _orders(behaviors: list[ProfileBehavior], since: datetime) -> list[ProfileBehavior]:
    return [
        b for b in behaviors
        if b.type == "order" and (b.timestamp is None or b.timestamp >= since)
    ]


def _order_count_clause(orders: list[ProfileBehavior], window_days: int) -> Optional[str]:
    if not orders:
        return None
    noun = "order" if len(orders) == 1 else "orders"
    return f"Placed {len(orders)} {noun} in the last {window_days} days."


def _favorite_restaurants_clause(orders: list[ProfileBehavior]) -> Optional[str]:
    counts: Counter = Counter()
    cuisines: dict[str, Optional[str]] = {}
    for order in orders:
        name = order.restaurant_name or order.context
        if not name:
            continue
        counts[name] += 1
        cuisines.setdefault(name, order.restaurant_cuisine)

    if not counts:
        return None

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:MAX_RESTAURANTS]
    names = [
        f"{name} ({cuisines[name]})" if cuisines.get(name) else name
        for name, _ in ranked
    ]
    return f"Orders most often from {', '.join(names)}."


def _activity_clauses(
    behaviors: list[ProfileBehavior], tz: Optional[tzinfo] = None
) -> list[str]:
    stamps = [
        b.timestamp.astimezone(tz or timezone.utc)
        for b in behaviors
        if b.timestamp is not None
    ]
    if len(stamps) < MIN_BEHAVIORS_FOR_PATTERNS:
        return []

    hours = Counter(t.hour for t in stamps)
    days = Counter(t.weekday() for t in stamps)
    top_hours = sorted(hours.items(), key=lambda item: (-item[1], item[0]))[:2]
    top_days = sorted(days.items(), key=lambda item: (-item[1], item[0]))[:2]

    return [
        f"Usually active around {_join([format_hour(h) for h, _ in top_hours])}.",
        f"Most active on {_join([WEEKDAYS[d] for d, _ in top_days])}.",
    ]


def _searches_clause(behaviors: list[ProfileBehavior]) -> Optional[str]:
    searches = [b for b in behaviors if b.type == "search" and b.action]
    if not searches:
        return None
    # Undated behaviors sort last
    searches.sort(key=lambda b: b.timestamp or _EPOCH, reverse=True)
    return f"Recently searched for {', '.join(b.action for b in searches[:MAX_SEARCHES])}."


def summarize_profile(
    profile: UserProfile,
    now: Optional[datetime] = None,
    window_days: int = 30,
    tz: Optional[tzinfo] = None,
) -> str:
    """Render the profile as a few short sentences."""
    now = now or utcnow()
    orders = _orders(profile.recent_behaviors, now - timedelta(days=window_days))

    clauses = [
        _identity_clause(profile),
        _diet_clause(profile),
        _liked_clause(profile),
        _disliked_clause(profile),
        _restrictions_clause(profile),
        _order_count_clause(orders, window_days),
        _favorite_restaurants_clause(orders),
        *_activity_clauses(profile.recent_behaviors, tz),
        _searches_clause(profile.recent_behaviors),
    ]
    return " ".join(c for c in clauses if c)
