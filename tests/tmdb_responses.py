"""
Upstream payloads used with respx to mock the movie service.
"""

GENRES_RESPONSE = {
    "genres": [
        {"id": 18, "name": "Drama"},
        {"id": 28, "name": "Action"},
        {"id": 12, "name": "Adventure"},
        {"id": 35, "name": "Comedy"},
    ]
}

DISCOVER_RESPONSE_1982 = {
    "page": 1,
    "results": [
        {
            "adult": False,
            "backdrop_path": "/bvSuBUl7I1ot5x8xfhCN4MtP0Kj.jpg",
            "genre_ids": [28, 12],
            "id": 1891,
            "original_language": "en",
            "original_title": "First Blood",
            "overview": "A veteran Green Beret is forced by a cruel sheriff...",
            "popularity": 39.87,
            "poster_path": "/a9sa6ERZCpplbPEO7OMWE763CLD.jpg",
            "release_date": "1982-10-22",
            "title": "First Blood",
            "video": False,
            "vote_average": 7.5,
            "vote_count": 6000,
        },
        {
            "adult": False,
            "backdrop_path": None,
            "genre_ids": None,
            "id": 1892,
            "original_language": "en",
            "original_title": "Blade Runner",
            "overview": "In the smog-choked dystopian Los Angeles of 2019...",
            "popularity": 55.0,
            "poster_path": None,
            "release_date": "1982-06-25",
            "title": "Blade Runner",
            "video": False,
            "vote_average": 7.9,
            "vote_count": 13000,
        },
    ],
    "total_pages": 1,
    "total_results": 2,
}

LANGUAGES_RESPONSE = [
    {"iso_639_1": "es", "english_name": "Spanish", "name": "Español"},
    {"iso_639_1": "en", "english_name": "English", "name": "English"},
    {"iso_639_1": "fr", "english_name": "French", "name": "Français"},
    {"iso_639_1": "it", "english_name": "Italian", "name": "Italiano"},
    {"iso_639_1": "de", "english_name": "German", "name": "Deutsch"},
]
