"""
Tests for pulse input parsing.
"""

import pytest

from repo_pulse.inputs import PulseInput, parse_pulse_input


class TestParsePulseInput:
    """Test conversion of untrusted JSON into PulseInput."""

    @pytest.mark.parametrize("raw", [None, 42, "repo", [1, 2], True])
    def test_non_mapping_yields_empty_input(self, raw):
        """Test non-mapping input yields an empty PulseInput."""
        assert parse_pulse_input(raw) == PulseInput()

    def test_slices_keep_expected_types(self):
        """Test each slice keeps only the expected type."""
        raw = {
            "repo": {"stargazers_count": 5},
            "participation": {"all": [1, 2]},
            "issues": [{"state": "open"}, "junk", None],
            "contributors": "not a list",
            "events": {"type": "WatchEvent"},
        }
        parsed = parse_pulse_input(raw)
        assert parsed.repo == {"stargazers_count": 5}
        assert parsed.participation == {"all": [1, 2]}
        assert parsed.issues == [{"state": "open"}]
        assert parsed.contributors is None
        assert parsed.events is None
        assert parsed.releases is None

    def test_repo_must_be_mapping(self):
        """Test a non-mapping repo slice is dropped."""
        parsed = parse_pulse_input({"repo": ["a"], "participation": [1, 2]})
        assert parsed.repo is None
        assert parsed.participation is None

    @pytest.mark.parametrize("key", ["prs", "pullRequests", "pull_requests"])
    def test_pull_request_aliases(self, key):
        """Test every pull request key spelling is accepted."""
        parsed = parse_pulse_input({key: [{"state": "open"}]})
        assert parsed.prs == [{"state": "open"}]

    def test_first_list_alias_wins(self):
        """Test an unusable pull request key does not hide a later list."""
        raw = {"prs": None, "pullRequests": [{"state": "open"}], "pull_requests": []}
        assert parse_pulse_input(raw).prs == [{"state": "open"}]
        assert parse_pulse_input({"prs": "many"}).prs is None

    def test_existing_input_passes_through(self):
        """Test a PulseInput is returned unchanged."""
        pulse_input = PulseInput(repo={"forks_count": 1})
        assert parse_pulse_input(pulse_input) is pulse_input
