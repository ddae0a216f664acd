"""Tests for the filter and group engine."""

import random
import re

from commitlog.domain import CommitType
from commitlog.services.classifier import classify
from commitlog.services.grouping import GROUP_PRECEDENCE, process, is_ignored
from tests.conftest import make_commit


def classified(*messages):
    """Classify messages given newest first, numbering hashes from the top."""
    return [classify(make_commit(m, n=i + 1)) for i, m in enumerate(messages)]


def summaries(group):
    return [e.summary for e in group.entries]


class TestFiltering:
    """Ignore rules."""

    def test_ignore_types(self):
        groups = process(classified("feat: add x", "chore: bump deps"), ignore_types={CommitType.CHORE})
        assert [g.type for g in groups] == [CommitType.FEAT]

    def test_ignore_summary_pattern(self):
        groups = process(
            classified("feat: add x", "fix: wip something", "fix: real fix"),
            ignore_summary_pattern=re.compile(r"^wip"),
        )
        fix = [g for g in groups if g.type is CommitType.FIX][0]
        assert summaries(fix) == ["real fix"]

    def test_ignore_summary_uses_search(self):
        commit = classify(make_commit("docs: update [skip ci] notes"))
        assert is_ignored(commit, set(), re.compile(r"\[skip ci\]"))

    def test_ignored_commits_never_appear(self):
        commits = classified(
            "feat: keep", "chore: drop", "ci: drop", "fix: release prep", "Random text",
        )
        groups = process(
            commits,
            ignore_types={CommitType.CHORE, CommitType.CI},
            ignore_summary_pattern=re.compile("release"),
        )
        rendered = [e.summary for g in groups for e in g.entries]
        assert rendered == ["keep", "Random text"]

    def test_everything_ignored(self):
        assert process(classified("chore: a"), ignore_types={CommitType.CHORE}) == []

    def test_duplicate_hashes_dropped(self):
        commit = make_commit("feat: once", n=1)
        groups = process([classify(commit), classify(commit)])
        assert len(groups[0].entries) == 1


class TestGrouping:
    """Group order and entry order."""

    def test_canonical_group_order(self):
        messages = [f"{t.value}: change" for t in CommitType if t is not CommitType.OTHER] + ["plain"]
        groups = process(classified(*messages))
        assert tuple(g.type for g in groups) == GROUP_PRECEDENCE

    def test_group_order_independent_of_input_order(self):
        commits = classified("chore: a", "docs: b", "fix: c", "feat: d", "perf: e", "what")
        expected = [CommitType.FEAT, CommitType.FIX, CommitType.PERF, CommitType.DOCS,
                    CommitType.CHORE, CommitType.OTHER]
        rng = random.Random(7)
        for _ in range(10):
            shuffled = commits[:]
            rng.shuffle(shuffled)
            assert [g.type for g in process(shuffled)] == expected

    def test_empty_groups_omitted(self):
        groups = process(classified("fix: a"))
        assert len(groups) == 1
        assert groups[0].type is CommitType.FIX

    def test_entries_keep_provider_order(self):
        groups = process(classified("feat: newest", "fix: x", "feat: middle", "feat: oldest"))
        assert summaries(groups[0]) == ["newest", "middle", "oldest"]

    def test_reverse_flips_only_entries(self):
        commits = classified("fix: f2", "feat: newest", "fix: f1", "feat: oldest")
        forward = process(commits)
        backward = process(commits, reverse=True)
        assert [g.type for g in forward] == [g.type for g in backward] == [CommitType.FEAT, CommitType.FIX]
        assert summaries(backward[0]) == ["oldest", "newest"]
        assert summaries(backward[1]) == ["f1", "f2"]
        assert summaries(forward[0]) == ["newest", "oldest"]

    def test_deterministic(self):
        commits = classified("feat: a", "fix: b", "feat: c")
        assert process(commits) == process(commits)
