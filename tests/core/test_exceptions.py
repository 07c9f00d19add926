"""Test exception (keep-rule) matching."""

import pytest

from unraidclean.config.settings import ExceptionsConfig, MovieExceptions, SeriesExceptions
from unraidclean.core.exceptions import ExceptionIndex, clean_path, has_path_prefix


@pytest.fixture
def index():
    config = ExceptionsConfig(
        movies=MovieExceptions(
            radarr_ids=[7],
            tmdb_ids=[603],
            imdb_ids=["TT0111161"],
            titles=["Spider-Man: Into the Spider-Verse"],
            path_prefixes=["/data/movies/kids//", "/data/./movies/keep"],
        ),
        series=SeriesExceptions(
            sonarr_ids=[3],
            tvdb_ids=[81189],
            imdb_ids=["tt0944947"],
            titles=["The Office (US)"],
            path_prefixes=["/data/tv/forever"],
        ),
    )
    return ExceptionIndex.from_config(config)


class TestMovieExceptions:
    """Each rule excludes on its own, whatever the other fields hold."""

    def test_radarr_id(self, index):
        assert index.is_movie_excluded(7, 0, "", "", "")
        assert index.is_movie_excluded(7, 1, "tt1", "Other", "/elsewhere")

    def test_tmdb_id(self, index):
        assert index.is_movie_excluded(0, 603, "", "", "")
        assert index.is_movie_excluded(99, 603, "tt1", "Other", "/elsewhere")

    def test_imdb_id_case_insensitive(self, index):
        assert index.is_movie_excluded(0, 0, "tt0111161", "", "")
        assert index.is_movie_excluded(99, 1, "Tt0111161", "Other", "/elsewhere")

    def test_normalized_title(self, index):
        assert index.is_movie_excluded(0, 0, "", "spider man into the spider verse", "")
        assert index.is_movie_excluded(99, 1, "tt1", "SPIDER-MAN: Into The Spider-Verse!", "/x")

    def test_path_prefix(self, index):
        assert index.is_movie_excluded(0, 0, "", "", "/data/movies/kids/Frozen (2013)")
        assert index.is_movie_excluded(99, 1, "tt1", "Other", "/data//movies/keep/./Heat")

    def test_no_rule_matches(self, index):
        assert not index.is_movie_excluded(99, 1, "tt1", "Other", "/data/movies/Heat (1995)")
        assert not index.is_movie_excluded(0, 0, "", "", "")

    def test_series_rules_do_not_apply_to_movies(self, index):
        assert not index.is_movie_excluded(3, 81189, "tt0944947", "The Office (US)", "/data/tv/forever")


class TestSeriesExceptions:
    """Series rules mirror movie rules."""

    def test_each_rule(self, index):
        assert index.is_series_excluded(3, 0, "", "", "")
        assert index.is_series_excluded(0, 81189, "", "", "")
        assert index.is_series_excluded(0, 0, "TT0944947", "", "")
        assert index.is_series_excluded(0, 0, "", "the office us", "")
        assert index.is_series_excluded(0, 0, "", "", "/data/tv/forever/Lost")

    def test_no_match(self, index):
        assert not index.is_series_excluded(4, 1, "tt2", "Lost", "/data/tv/Lost")


class TestPathPrefix:
    """Test cleaned string-prefix matching."""

    def test_plain_string_prefix(self):
        # String prefix, not path-component prefix
        assert has_path_prefix("/data/movies-old/x", ["/data/movies"])

    def test_double_slash_prefix(self):
        index = ExceptionIndex.from_config(
            ExceptionsConfig(movies=MovieExceptions(path_prefixes=["//data/movies"]))
        )
        assert index.is_movie_excluded(0, 0, "", "", "/data/movies/Heat")

    def test_double_slash_path(self):
        index = ExceptionIndex.from_config(
            ExceptionsConfig(movies=MovieExceptions(path_prefixes=["/data/movies"]))
        )
        assert index.is_movie_excluded(0, 0, "", "", "//data/movies/Heat")
        assert index.is_movie_excluded(0, 0, "", "", "///data//movies/./Heat")

    def test_clean_path(self):
        assert clean_path("//data//movies/") == "/data/movies"
        assert clean_path("/data/./movies/../tv") == "/data/tv"

    def test_empty_path(self):
        assert not has_path_prefix("", ["/data"])

    def test_no_prefixes(self):
        assert not has_path_prefix("/data/x", [])


def test_empty_config_excludes_nothing():
    index = ExceptionIndex.from_config(ExceptionsConfig())
    assert not index.is_movie_excluded(1, 2, "tt3", "Title", "/data")
    assert not index.is_series_excluded(1, 2, "tt3", "Title", "/data")
