from collections import namedtuple

from .. import database

PLACE_SUBMISSION_POINTS = 50
COMMENT_POINTS = 10

MAX_LEADERBOARD_SIZE = 50

Rank = namedtuple("Rank", ["title", "icon", "min_points"])

RANKS = (
    Rank("New Explorer", "🌱", 0),
    Rank("Local Guide", "🧭", 100),
    Rank("Route Master", "🗺️", 500),
    Rank("Legend", "👑", 1000),
)


def award_points(db, user_id, amount):
    db.execute("UPDATE users SET points = points + ? WHERE id = ?", (amount, user_id))


def rank_for(points):
    current = RANKS[0]
    for rank in RANKS:
        if points >= rank.min_points:
            current = rank
    return current


def next_rank(points):
    for rank in RANKS:
        if points < rank.min_points:
            return rank
    return None


def progress(points):
    """Percentage of the way from the current rank to the next one."""
    upcoming = next_rank(points)
    if upcoming is None:
        return 100
    current = rank_for(points)
    gap = upcoming.min_points - current.min_points
    return min(round((points - current.min_points) / gap * 100), 100)


def rank_info(points):
    upcoming = next_rank(points)
    return {
        "rank": rank_for(points)._asdict(),
        "next_rank": upcoming._asdict() if upcoming else None,
        "progress": progress(points),
    }


def leaderboard(limit):
    limit = max(1, min(int(limit), MAX_LEADERBOARD_SIZE))
    rows = database.get_db().execute(
        """
        SELECT id, username, avatar_url, points
        FROM users
        ORDER BY points DESC, id ASC
        LIMIT ?
        """,
        (limit,),
    ).fetchall()
    board = []
    for position, row in enumerate(rows, start=1):
        entry = dict(row)
        entry["position"] = position
        entry["rank"] = rank_for(row["points"]).title
        board.append(entry)
    return board
