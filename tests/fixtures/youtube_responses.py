"""
Sample YouTube Data API v3 responses, trimmed to the fields the client reads.

Used with respx to mock httpx calls in tests.
"""

# GET /search?type=channel&q=Muse Asia
CHANNEL_SEARCH_RESPONSE = {
    "items": [
        {
            "id": {"kind": "youtube#channel", "channelId": "UC_muse_fan"},
            "snippet": {"title": "Muse Asia Fan Edits", "channelId": "UC_muse_fan"},
        },
        {
            "id": {"kind": "youtube#channel", "channelId": "UCGbshtvS9t-8CW11W7TooQg"},
            "snippet": {"title": "Muse Asia", "channelId": "UCGbshtvS9t-8CW11W7TooQg"},
        },
        {
            "snippet": {"title": "Muse Mirror", "channelId": "UC_mirror"},
        },
        {
            "id": {"kind": "youtube#channel"},
            "snippet": {"title": "Broken Result"},
        },
    ]
}

# GET /search?type=playlist&q=fantasy anime playlist
PLAYLIST_SEARCH_RESPONSE = {
    "items": [
        {
            "id": {"kind": "youtube#playlist", "playlistId": "PL_fantasy_1"},
            "snippet": {"title": "Fantasy Anime Season 1", "channelTitle": "Ani-One Asia"},
        },
        {
            "id": "PL_fantasy_2",
            "snippet": {"title": "Magic School", "channelTitle": "Muse Asia"},
        },
    ]
}

# GET /videos?id=vid_ok,vid_blocked,vid_private
VIDEOS_RESPONSE = {
    "items": [
        {
            "id": "vid_ok",
            "snippet": {
                "title": "Episode 1",
                "description": "First episode",
                "publishedAt": "2024-01-05T10:00:00Z",
                "thumbnails": {"default": {"url": "https://i.ytimg.com/vi/vid_ok/default.jpg"}},
            },
            "contentDetails": {"duration": "PT23M40S"},
            "status": {"embeddable": True, "privacyStatus": "public"},
        },
        {
            "id": "vid_blocked",
            "snippet": {"title": "Episode 2"},
            "contentDetails": {
                "duration": "PT24M",
                "regionRestriction": {"blocked": ["IN", "PK"]},
            },
            "status": {"embeddable": True, "privacyStatus": "public"},
        },
        {
            "id": "vid_private",
            "snippet": {"title": "Episode 3"},
            "contentDetails": {"duration": "bogus"},
            "status": {"privacyStatus": "private"},
        },
    ]
}


def playlist_items_page(video_ids, next_page_token=None):
    """One page of playlistItems.list."""
    page = {
        "items": [
            {
                "snippet": {"title": f"Title {vid}", "position": i},
                "contentDetails": {"videoId": vid},
            }
            for i, vid in enumerate(video_ids)
        ]
    }
    if next_page_token:
        page["nextPageToken"] = next_page_token
    return page


def videos_page(video_ids):
    """videos.list response with public embeddable entries for the given ids."""
    return {
        "items": [
            {
                "id": vid,
                "snippet": {"title": f"Title {vid}"},
                "contentDetails": {"duration": "PT24M"},
                "status": {"embeddable": True, "privacyStatus": "public"},
            }
            for vid in video_ids
        ]
    }
