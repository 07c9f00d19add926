"""Test exception enrichment."""

from unraidclean.config.settings import ExceptionsConfig, MovieExceptions, SeriesExceptions
from unraidclean.core.enrich import enrich_exceptions


class TestEnrichExceptions:
    """Test backfilling exception entries from catalogs."""

    def test_movie_by_radarr_id(self, sample_movie):
        exceptions = ExceptionsConfig(movies=MovieExceptions(radarr_ids=[1]))

        changes = enrich_exceptions(exceptions, [sample_movie], [])

        assert changes == ["movie: The Matrix"]
        assert exceptions.movies.titles == ["The Matrix"]
        assert exceptions.movies.path_prefixes == ["/data/movies/The Matrix (1999)"]
        assert exceptions.movies.imdb_ids == ["tt0133093"]
        assert exceptions.movies.tmdb_ids == [603]

    def test_movie_by_imdb_case_insensitive(self, sample_movie):
        exceptions = ExceptionsConfig(movies=MovieExceptions(imdb_ids=["TT0133093"]))

        changes = enrich_exceptions(exceptions, [sample_movie], [])

        assert changes == ["movie: The Matrix"]
        assert exceptions.movies.imdb_ids == ["TT0133093", "tt0133093"]

    def test_series_by_tvdb_id(self, sample_series):
        exceptions = ExceptionsConfig(series=SeriesExceptions(tvdb_ids=[81189]))

        changes = enrich_exceptions(exceptions, [], [sample_series])

        assert changes == ["series: Breaking Bad"]
        assert exceptions.series.titles == ["Breaking Bad"]
        assert exceptions.series.path_prefixes == ["/data/tv/Breaking Bad"]
        assert exceptions.series.tvdb_ids == [81189]

    def test_second_run_is_a_no_op(self, sample_movie, sample_series):
        exceptions = ExceptionsConfig(
            movies=MovieExceptions(tmdb_ids=[603]),
            series=SeriesExceptions(sonarr_ids=[10]),
        )
        assert len(enrich_exceptions(exceptions, [sample_movie], [sample_series])) == 2
        assert enrich_exceptions(exceptions, [sample_movie], [sample_series]) == []

    def test_entry_matched_twice_reported_once(self, sample_movie):
        exceptions = ExceptionsConfig(movies=MovieExceptions(radarr_ids=[1], tmdb_ids=[603]))
        assert enrich_exceptions(exceptions, [sample_movie], []) == ["movie: The Matrix"]

    def test_unknown_ids_ignored(self, sample_movie):
        exceptions = ExceptionsConfig(movies=MovieExceptions(radarr_ids=[99]))
        assert enrich_exceptions(exceptions, [sample_movie], []) == []
        assert exceptions.movies.titles == []
