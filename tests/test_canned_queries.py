import pytest

from canned_queries import PREDEFINED_QUERIES, get_canned_query
from query_runner import substitute_parameters


def test_menu_has_twelve_unique_queries():
    ids = [q.id for q in PREDEFINED_QUERIES]
    assert len(ids) == 12
    assert len(set(ids)) == 12
    assert all(q.name and q.description and q.query.strip() for q in PREDEFINED_QUERIES)


def test_lookup_by_id():
    assert get_canned_query("query3").name == "Branch Account Statistics"
    with pytest.raises(KeyError):
        get_canned_query("query99")


def test_branch_query_parameter_is_substituted():
    canned = get_canned_query("query2")
    prepared = substitute_parameters(canned.query, canned.parameters)
    assert "b.branch_name = 'Downtown Branch'" in prepared
    assert "'branchName'" not in prepared


def test_queries_are_read_only():
    for q in PREDEFINED_QUERIES:
        assert q.query.strip().upper().startswith("SELECT")
