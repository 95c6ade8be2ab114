"""End-to-end tests of the cached search pipeline and the command-line entry point."""
import json
from unittest.mock import MagicMock, patch

import pytest

import main
from core.config import Settings
from core.trip_spec import LegSpec, TripSpec
from search.city_resolver import UnresolvedCityError
from stubs import StubFlightDataProvider

BUDAPEST_CORFU = TripSpec(outbound=LegSpec(origins=["Budapest"], destinations=["Corfu"], dates=["2025-09-11"]))


@pytest.mark.asyncio
async def test_search_trip_budapest_corfu(stub_provider, result_cache, test_settings):
    result = await main.search_trip(BUDAPEST_CORFU, stub_provider, result_cache, "results", test_settings)

    assert len(result.outbound) == 1
    flight = result.outbound[0]
    assert flight.price == 123.45
    assert flight.carrier == "Test Air"
    assert "/BUD/CFU/20250911/" in flight.url
    assert result.inbound == []
    assert result_cache.path_for("results").is_file()


@pytest.mark.asyncio
async def test_seeded_cache_means_no_provider_calls(stub_provider, result_cache, test_settings):
    result_cache.path_for("results").write_text('{"outbound":[],"inbound":[]}', encoding="utf-8")

    result = await main.search_trip(BUDAPEST_CORFU, stub_provider, result_cache, "results", test_settings)

    assert result.outbound == [] and result.inbound == []
    assert stub_provider.calls == []


@pytest.mark.asyncio
async def test_rerun_reads_back_identical_result(stub_provider, result_cache, test_settings):
    first = await main.search_trip(BUDAPEST_CORFU, stub_provider, result_cache, "results", test_settings)
    calls_after_first = len(stub_provider.calls)

    second = await main.search_trip(BUDAPEST_CORFU, StubFlightDataProvider(), result_cache, "results", test_settings)

    assert second == first
    assert len(stub_provider.calls) == calls_after_first


@pytest.mark.asyncio
async def test_unresolved_city_leaves_no_cache(stub_provider, result_cache, test_settings):
    spec = TripSpec(outbound=LegSpec(
        origins=["Budapest", "Nowhereland"], destinations=["Corfu"], dates=["2025-09-11", "2025-09-12"],
    ))

    with pytest.raises(UnresolvedCityError):
        await main.search_trip(spec, stub_provider, result_cache, "results", test_settings)

    # Budapest's two dates were searched; nothing after Nowhereland
    assert len(stub_provider.searches()) == 2
    assert not result_cache.path_for("results").exists()


# ── Command line ──────────────────────────────────────────────────────────────

def _write_trip(tmp_path, data: dict) -> str:
    path = tmp_path / "trip.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_main_dry_run_with_mock_provider(tmp_path, test_settings):
    trip = _write_trip(tmp_path, {
        "outbound": {"origins": ["Budapest"], "destinations": ["Corfu"], "dates": ["2025-09-11"]},
        "inbound": {"origins": ["Corfu"], "destinations": ["Budapest"], "dates": ["2025-09-16"]},
    })

    with patch.object(main, "default_settings", test_settings):
        code = main.main(["--trip", trip, "--skip-sheet"])

    assert code == 0
    cached = json.loads((tmp_path / "cache-results.json").read_text(encoding="utf-8"))
    # Mock provider has two non-stop flights per query
    assert len(cached["outbound"]) == 2
    assert len(cached["inbound"]) == 2


def test_main_publishes_to_sheet(tmp_path, test_settings):
    trip = _write_trip(tmp_path, {
        "outbound": {"origins": ["Budapest"], "destinations": ["Corfu"], "dates": ["2025-09-11"]},
    })
    presenter = MagicMock()

    with patch.object(main, "default_settings", test_settings), \
            patch("presenters.sheets.SheetsPresenter.from_settings", return_value=presenter):
        code = main.main(["--trip", trip, "--cache-key", "sheet-run"])

    assert code == 0
    presenter.publish.assert_called_once()
    published = presenter.publish.call_args.args[0]
    assert len(published.outbound) == 2
    assert (tmp_path / "cache-sheet-run.json").is_file()


def test_main_missing_api_key_fails_before_search(tmp_path):
    settings = Settings(_env_file=None, use_real_apis=True, rapid_api_key="", cache_dir=str(tmp_path))
    trip = _write_trip(tmp_path, {
        "outbound": {"origins": ["Budapest"], "destinations": ["Corfu"], "dates": ["2025-09-11"]},
    })

    with patch.object(main, "default_settings", settings), \
            patch("providers.real.skyscanner.SkyscannerProvider") as provider_cls:
        code = main.main(["--trip", trip, "--skip-sheet"])

    assert code == 1
    provider_cls.assert_not_called()
    assert not (tmp_path / "cache-results.json").exists()


def test_main_unknown_city_exits_nonzero(tmp_path, test_settings):
    trip = _write_trip(tmp_path, {
        "outbound": {"origins": ["Nowhereland"], "destinations": ["Corfu"], "dates": ["2025-09-11"]},
    })

    with patch.object(main, "default_settings", test_settings):
        code = main.main(["--trip", trip, "--skip-sheet"])

    assert code == 1
    assert not (tmp_path / "cache-results.json").exists()


def test_main_missing_trip_file(tmp_path, test_settings):
    with patch.object(main, "default_settings", test_settings):
        assert main.main(["--trip", str(tmp_path / "absent.json"), "--skip-sheet"]) == 1


def test_main_broken_trip_json_exits_nonzero(tmp_path, test_settings):
    trip = tmp_path / "trip.json"
    trip.write_text("{not json", encoding="utf-8")

    with patch.object(main, "default_settings", test_settings):
        code = main.main(["--trip", str(trip), "--skip-sheet"])

    assert code == 1
    assert not (tmp_path / "cache-results.json").exists()
