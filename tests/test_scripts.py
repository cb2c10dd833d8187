import pytest

from conftest import block, green_flag_script, if_else_blocks, project, relabel, target

from scratchdiff.errors import DelegatedDiffError, GraphIntegrityError
from scratchdiff.line_diff import DiffStat
from scratchdiff.project_io import parse_project
from scratchdiff.scripts import ScriptChanges, count_blocks, is_menu_block, script_changes


def snapshot_with(*targets):
    return parse_project(project(*targets))


def test_menu_blocks_are_not_counted():
    assert is_menu_block("motion_goto_menu")
    assert not is_menu_block("motion_goto")
    assert count_blocks(green_flag_script()) == 3


def test_count_blocks_skips_reporter_arrays():
    blocks = {"var": [12, "score", "varid", 0, 0], "show": block("looks_show", top_level=True)}
    assert count_blocks(blocks) == 1


def test_snapshot_against_itself_has_no_changes(cat_snapshot):
    assert script_changes(cat_snapshot, cat_snapshot) == []


def test_renamed_ids_are_not_a_change():
    blocks = green_flag_script()
    renamed = relabel(blocks, {block_id: block_id.upper() + "_2" for block_id in blocks})
    old = snapshot_with(target("Cat", blocks=blocks))
    new = snapshot_with(target("Cat", blocks=renamed))

    assert old.sprites[0].blocks != new.sprites[0].blocks
    assert script_changes(old, new) == []


def test_if_else_against_empty_graph_counts_every_block():
    blocks = if_else_blocks()
    old = snapshot_with(target("Cat"))
    new = snapshot_with(target("Cat", blocks=blocks))

    assert script_changes(old, new) == [ScriptChanges(sprite="Cat", added=5, removed=0, on_stage=False)]
    assert count_blocks(blocks) == 5


def test_sprite_only_in_new_counts_blocks():
    old = snapshot_with(target("Stage", is_stage=True))
    new = snapshot_with(target("Stage", is_stage=True), target("Cat", blocks=green_flag_script()))

    assert script_changes(old, new) == [ScriptChanges(sprite="Cat", added=3, removed=0, on_stage=False)]


def test_sprite_only_in_old_counts_blocks():
    old = snapshot_with(target("Stage", is_stage=True), target("Cat", blocks=if_else_blocks()))
    new = snapshot_with(target("Stage", is_stage=True))

    assert script_changes(old, new) == [ScriptChanges(sprite="Cat", added=0, removed=5, on_stage=False)]


def test_new_sprite_with_only_menu_blocks_counts_zero():
    menu_only = {"gotomenu": block("motion_goto_menu", top_level=True, fields={"TO": ["_random_", None]})}
    old = snapshot_with(target("Stage", is_stage=True))
    new = snapshot_with(target("Stage", is_stage=True), target("Cat", blocks=menu_only))

    assert script_changes(old, new) == [ScriptChanges(sprite="Cat", added=0, removed=0, on_stage=False)]


def test_removed_sprite_without_blocks_counts_zero():
    old = snapshot_with(target("Stage", is_stage=True), target("Cat"))
    new = snapshot_with(target("Stage", is_stage=True))

    assert script_changes(old, new) == [ScriptChanges(sprite="Cat", added=0, removed=0, on_stage=False)]


def test_edited_script_counts_lines():
    old_blocks = green_flag_script()
    new_blocks = green_flag_script()
    new_blocks["move"]["inputs"]["STEPS"] = [1, [4, "20"]]
    new_blocks["goto"]["next"] = "hide"
    new_blocks["hide"] = block("looks_hide", parent="goto")
    old = snapshot_with(target("Cat", blocks=old_blocks))
    new = snapshot_with(target("Cat", blocks=new_blocks))

    assert script_changes(old, new) == [ScriptChanges(sprite="Cat", added=2, removed=1, on_stage=False)]


def test_stage_changes_use_stage_suffix():
    old = snapshot_with(target("Stage", is_stage=True))
    new = snapshot_with(target("Stage", blocks=green_flag_script(), is_stage=True))

    changes = script_changes(old, new)

    assert changes[0].sprite == "Stage (stage)"
    assert changes[0].on_stage is True
    assert changes[0].format() == "Stage (stage): +3/-0 blocks"


def test_sprites_are_paired_by_position():
    old = snapshot_with(target("Cat", blocks=green_flag_script()), target("Dog", blocks=if_else_blocks()))
    new = snapshot_with(target("Dog", blocks=if_else_blocks()), target("Cat", blocks=green_flag_script()))

    changes = script_changes(old, new)

    assert [change.sprite for change in changes] == ["Cat", "Dog"]


def test_reordered_scripts_are_not_a_change():
    blocks = green_flag_script()
    blocks.update(if_else_blocks())
    reordered = dict(reversed(list(blocks.items())))
    reordered["flag"] = dict(reordered["flag"], x=300, y=120)
    old = snapshot_with(target("Cat", blocks=blocks))
    new = snapshot_with(target("Cat", blocks=reordered))

    assert script_changes(old, new) == []


def test_delegated_diff_receives_canonical_texts():
    calls = []

    def fake_diff(old_text, new_text, context_lines):
        calls.append((old_text, new_text, context_lines))
        return DiffStat(added=4, removed=-2)

    old = snapshot_with(target("Cat", blocks=green_flag_script()))
    new = snapshot_with(target("Cat", blocks=if_else_blocks()))

    changes = script_changes(old, new, line_diff=fake_diff, context_lines=50)

    assert changes == [ScriptChanges(sprite="Cat", added=4, removed=2, on_stage=False)]
    assert calls[0][0].startswith("event_whenflagclicked")
    assert calls[0][1].startswith("control_if_else")
    assert calls[0][2] == 50


def test_zero_line_diff_is_not_reported():
    old = snapshot_with(target("Cat", blocks=green_flag_script()))
    new = snapshot_with(target("Cat", blocks=if_else_blocks()))

    assert script_changes(old, new, line_diff=lambda a, b, n: DiffStat(0, 0)) == []


def test_broken_graph_fails_whole_comparison():
    broken = {"flag": block("event_whenflagclicked", next="ghost", top_level=True)}
    old = snapshot_with(
        target("Cat", blocks=green_flag_script()),
        target("Dog", blocks={"show": block("looks_show", top_level=True)}),
    )
    new = snapshot_with(target("Cat", blocks=if_else_blocks()), target("Dog", blocks=broken))

    with pytest.raises(GraphIntegrityError):
        script_changes(old, new)


def test_diff_failure_fails_whole_comparison():
    def failing_diff(old_text, new_text, context_lines):
        raise DelegatedDiffError("git diff failed")

    old = snapshot_with(target("Cat", blocks=green_flag_script()))
    new = snapshot_with(target("Cat", blocks=if_else_blocks()))

    with pytest.raises(DelegatedDiffError):
        script_changes(old, new, line_diff=failing_diff)
