from georisk.core.catalog import catalog
from georisk.core.synthesizer import GeologicalSynthesizer

from tests.conftest import LowRng


def test_zero_jitter_returns_baseline(zero_jitter, cuchilla):
    snap = zero_jitter.synthesize(cuchilla)
    assert snap.elevation == 2400
    assert snap.slope == 30.0
    assert snap.precipitation == 2200
    assert snap.soil_type == "Entisol"
    assert snap.geological_formation == "Batolito Antioqueño"


def test_jitter_stays_in_bounds(seeded_rng):
    synth = GeologicalSynthesizer(rng=seeded_rng)
    for district in catalog.districts:
        for _ in range(50):
            snap = synth.synthesize(district)
            assert abs(snap.elevation - district.base_elevation) <= 40
            assert abs(snap.precipitation - district.base_precipitation) <= 75
            assert snap.slope >= 0
            assert snap.slope <= district.base_slope + 4
            assert snap.soil_type == district.soil_type


def test_formation_matches_reported_elevation(seeded_rng):
    synth = GeologicalSynthesizer(rng=seeded_rng)
    # San Antonio sits right around the Combia band edge
    district = catalog.district("Vereda San Antonio")
    for _ in range(200):
        snap = synth.synthesize(district)
        assert snap.geological_formation == catalog.formation_for_elevation(snap.elevation)


def test_slope_never_negative(raw_catalog, make_catalog):
    raw_catalog["districts"][0]["base_slope"] = 1
    geo = make_catalog(raw_catalog)
    synth = GeologicalSynthesizer(rng=LowRng(), geo_catalog=geo)
    snap = synth.synthesize(geo.districts[0])
    assert snap.slope == 0.0


def test_same_seed_same_snapshot(cuchilla):
    a = GeologicalSynthesizer(seed=7).synthesize(cuchilla)
    b = GeologicalSynthesizer(seed=7).synthesize(cuchilla)
    assert a == b
