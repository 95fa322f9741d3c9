def history_key(viewer_id: str) -> str:
    return f"viewer:{viewer_id}:history"


def watchlist_key(viewer_id: str) -> str:
    return f"viewer:{viewer_id}:watchlist"
