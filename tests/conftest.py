#!/usr/bin/env python3
"""
Shared fixtures for phyloprimer tests.
"""

import pytest

from phyloprimer.core.sequence import melting_temperature
from phyloprimer.main import setup_logging
from phyloprimer.models import Sequence

# 20 bp, 10 GC, starts with G and ends with C. Any other 20 bp window that
# overlaps it drops one of those end bases and has fewer than 10 GC.
PRIMER_SITE = "GAAAAGCGCGCGCAAAAAAC"


@pytest.fixture(autouse=True)
def quiet_logging():
    """Reduce log noise in tests."""
    setup_logging("WARNING")


@pytest.fixture
def primer_site():
    return PRIMER_SITE


@pytest.fixture
def site_tm():
    """Tm shared only by 20 bp windows with exactly 10 GC."""
    return melting_temperature(PRIMER_SITE)


@pytest.fixture
def single_pair_dna():
    """200 bp template with one valid forward and one valid reverse site.

    Forward site at 20-39, target region 90-110, reverse site at 150-169.
    """
    dna = "A" * 20 + PRIMER_SITE + "A" * 110 + PRIMER_SITE + "A" * 30
    assert len(dna) == 200
    return dna


@pytest.fixture
def two_forward_dna():
    """200 bp template with forward sites at 0 and 40 and a reverse site at 150."""
    dna = PRIMER_SITE + "A" * 20 + PRIMER_SITE + "A" * 90 + PRIMER_SITE + "A" * 30
    assert len(dna) == 200
    return dna


@pytest.fixture
def three_sequences():
    """A and B differ at one base, C shares nothing with either."""
    return [
        Sequence("A", "ACGTACGTAC"),
        Sequence("B", "ACGTACGTAA"),
        Sequence("C", "TTTTTTTTTT"),
    ]
