"""Typing scenarios through the engine and an in-memory text field."""

from hotstring.host import INSERT_FROM_PASTE, KeyEvent, type_keys


def test_fire_immediately_without_end_char(engine, host):
    engine.register(":*:btw", "By the way")
    type_keys(engine, host, "btw")
    assert host.text == "By the way"
    assert engine.buffer.text == ""


def test_end_char_is_appended(engine, host):
    engine.register("::btw", "by the way")
    type_keys(engine, host, "btw ")
    assert host.text == "by the way "


def test_no_fire_without_end_char(engine, host):
    engine.register("::btw", "by the way")
    type_keys(engine, host, "btw")
    assert host.text == "btw"
    assert engine.buffer.text == "btw"


def test_case_conformity(engine, host):
    engine.register("::btw", "by the way")
    type_keys(engine, host, "Btw ")
    assert host.text == "By the way "

    host.text = ""
    host.set_caret(0)
    type_keys(engine, host, "BTW ")
    assert host.text == "BY THE WAY "

    host.text = ""
    host.set_caret(0)
    type_keys(engine, host, "btw ")
    assert host.text == "by the way "


def test_case_sensitive_trigger(engine, host):
    engine.register(":C:BTW", "by the way")
    type_keys(engine, host, "btw ")
    assert host.text == "btw "


def test_no_conformity(engine, host):
    engine.register(":C1:btw", "by the way")
    type_keys(engine, host, "BTW ")
    assert host.text == "by the way "


def test_omit_end_char(engine, host):
    engine.register(":O:btw", "by the way")
    type_keys(engine, host, "btw.")
    assert host.text == "by the way"


def test_no_backspace(engine, host):
    engine.register(":*B0:btw", "-ok")
    type_keys(engine, host, "btw")
    assert host.text == "btw-ok"


def test_trigger_inside_word_needs_question_mark(engine, host):
    engine.register("::btw", "by the way")
    type_keys(engine, host, "abtw ")
    assert host.text == "abtw "


def test_inside_word_option(engine, host):
    engine.register(":?:btw", "by the way")
    type_keys(engine, host, "abtw ")
    assert host.text == "aby the way "


def test_punctuation_counts_as_word_boundary(engine, host):
    engine.register("::btw", "by the way")
    type_keys(engine, host, "(btw ")
    assert host.text == "(by the way "


def test_longer_trigger_wins(engine, host):
    engine.register(":*:ab", "short")
    engine.register(":*:cab", "long")
    type_keys(engine, host, "cab")
    assert host.text == "long"


def test_priority_beats_length(engine, host):
    engine.register(":*:cab", "long")
    engine.register(":*?P5:ab", "priority")
    type_keys(engine, host, "cab")
    assert host.text == "cpriority"


def test_only_one_definition_fires(engine, host, observer):
    engine.register(":*:btw", "one")
    engine.register(":*?:tw", "two")
    type_keys(engine, host, "btw")
    assert host.text == "one"
    assert [d.label for d in observer.fired] == [":*:btw"]


def test_output_does_not_retrigger(engine, host):
    engine.register(":*:a", "aa")
    type_keys(engine, host, "a")
    assert host.text == "aa"
    assert engine.buffer.text == ""


def test_backspace_shortens_buffer(engine, host):
    engine.register("::btw", "by the way")
    type_keys(engine, host, "btx\bw ")
    assert host.text == "by the way "


def test_navigation_resets(engine, host, observer):
    engine.register("::btw", "by the way")
    type_keys(engine, host, ["b", "t", "ArrowLeft", "ArrowRight", "w", " "])
    assert host.text == "btw "
    assert observer.snapshots[-3].reset_reason == "Nav: ArrowRight"


def test_modifier_resets(engine, host):
    engine.register("::btw", "by the way")
    type_keys(engine, host, ["b", "t", KeyEvent("c", ctrl=True), "w", " "])
    assert host.text == "btw "


def test_paste_resets(engine, host):
    engine.register("::btw", "by the way")
    type_keys(engine, host, "bt")
    engine.handle_input(INSERT_FROM_PASTE, "xyz")
    assert engine.buffer.text == ""


def test_pointer_press_resets_unless_disabled(engine, host):
    type_keys(engine, host, "bt")
    engine.handle_pointer_down()
    assert engine.buffer.text == ""

    type_keys(engine, host, "bt")
    engine.set_no_mouse(True)
    engine.handle_pointer_down()
    assert engine.buffer.text == "bt"


def test_blur_resets(engine, host, observer):
    type_keys(engine, host, "bt")
    engine.handle_blur()
    assert engine.buffer.text == ""
    assert observer.snapshots[-1].reset_reason == "Focus Lost"


def test_manual_reset_on_empty_buffer(engine, observer):
    engine.reset_buffer("Testing")
    engine.reset_buffer("Testing")
    assert engine.buffer.text == ""
    assert observer.snapshots[-1].reset_reason == "Testing"


def test_tab_is_inserted_and_ends_trigger(engine, host):
    engine.register("::btw", "by the way")
    type_keys(engine, host, "btw\t")
    assert host.text == "by the way\t"


def test_enter_ends_trigger(engine, host):
    engine.register("::btw", "by the way")
    type_keys(engine, host, "btw\n")
    assert host.text == "by the way\n"


def test_set_end_chars_replaces_set(engine, host):
    engine.register("::btw", "by the way")
    engine.set_end_chars("#")
    assert engine.end_chars == "#"
    type_keys(engine, host, "btw ")
    assert host.text == "btw "
    type_keys(engine, host, "btw#")
    assert host.text == "btw by the way#"


def test_end_chars_keep_given_order(engine):
    engine.set_end_chars("#!#")
    assert engine.end_chars == "#!"
    engine.set_end_chars(" .")
    assert engine.end_chars == " ."


def test_suspend_only_allows_exempt(engine, host):
    engine.register("::btw", "by the way")
    engine.register(":S:brb", "be right back")
    assert engine.toggle_suspend() is True
    type_keys(engine, host, "btw ")
    assert host.text == "btw "
    type_keys(engine, host, "brb ")
    assert host.text == "btw be right back "
    assert engine.toggle_suspend() is False


def test_buffer_is_bounded(engine, host):
    type_keys(engine, host, "x" * 100)
    assert engine.buffer.text == "x" * 60
