import numpy as np
import pytest

from callrisk.triage import CANNED_RESPONSES, triage_query


class TestTriage:

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_empty_query_rejected(self, query):
        with pytest.raises(ValueError):
            triage_query(query, delay=0)

    def test_returns_canned_response(self):
        result = triage_query("  I was charged twice  ", np.random.default_rng(3), delay=0)

        assert result.query == "I was charged twice"
        assert (result.category, result.escalated, result.response) in CANNED_RESPONSES
        assert result.elapsed >= 0

    def test_only_technical_is_escalated(self):
        rng = np.random.default_rng(0)
        for _ in range(20):
            result = triage_query("help", rng, delay=0)
            assert result.escalated == (result.category == "technical")

    def test_reproducible_with_seed(self):
        a = triage_query("help", np.random.default_rng(11), delay=0)
        b = triage_query("help", np.random.default_rng(11), delay=0)
        assert a.response == b.response
