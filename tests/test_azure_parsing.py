"""
tests/test_azure_parsing.py
Unit tests for src/azure/parsing.py.
"""

from src.azure.parsing import flatten_area_paths, parse_snapshot, parse_work_item
from src.workitems.types import RelationKind, RelationRecord


def test_parse_work_item_maps_fields():
    item = parse_work_item(
        {
            "id": 17,
            "fields": {
                "System.WorkItemType": "Product Backlog Item",
                "System.State": "Committed",
                "System.Title": " Export ",
                "System.AreaPath": "Proj\\Data",
                "System.Tags": "csv; Gov:CTB",
                "Microsoft.VSTS.Scheduling.Effort": 5,
                "Microsoft.VSTS.Common.BusinessValue": 140,
            },
        }
    )
    assert item.id == 17
    assert item.title == "Export"
    assert item.effort == 5.0
    assert item.business_value == 100
    assert item.description == ""


def test_parse_work_item_rejects_missing_id():
    assert parse_work_item({"fields": {}}) is None
    assert parse_work_item("nope") is None


def test_parse_work_item_tolerates_bad_numbers():
    item = parse_work_item(
        {"id": "4", "fields": {"Microsoft.VSTS.Scheduling.Effort": "lots", "Microsoft.VSTS.Common.BusinessValue": "x"}}
    )
    assert item.effort is None
    assert item.business_value == 0


def test_parse_snapshot_builds_relation_map():
    items, relations = parse_snapshot(
        [
            {
                "id": 1,
                "fields": {"System.Title": "Parent"},
                "relations": [
                    {"rel": "System.LinkTypes.Hierarchy-Forward", "url": "https://dev/_apis/wit/workItems/2"}
                ],
            },
            {"id": 2, "fields": {"System.Title": "Child"}},
            {"fields": {}},
        ]
    )
    assert [item.id for item in items] == [1, 2]
    assert relations == {1: [RelationRecord(RelationKind.CHILD, 2, 0)], 2: []}


def test_flatten_area_paths_lists_three_levels():
    root = {
        "name": "Proj",
        "children": [
            {"name": "Web", "children": [{"name": "Checkout", "children": [{"name": "Deep"}]}]},
            {"name": "Api"},
        ],
    }
    assert flatten_area_paths(root) == ["Proj", "Proj\\Web", "Proj\\Web\\Checkout", "Proj\\Api"]


def test_flatten_area_paths_handles_empty_payload():
    assert flatten_area_paths({}) == []
