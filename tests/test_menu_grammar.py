"""
Menu line grammar: segmentation, line-based item building, sections.

Covers:
  Segmentation:
  - split_lines trims and drops blanks
  - category headers: vocabulary hits, ALL CAPS lines, priced lines never headers
  - restaurant names: first three lines only, venue keywords, Title Case,
    catalog venue terms
  - menu-item predicate: priced lines, short capitalised names

  Item building:
  - name / description split on dash and colon
  - lowest price used; title-cased names
  - rejects: too short, numeric, page furniture, 1-char names

  Continuation policy:
  - lowercase follow-on line folds into previous item description
  - capitalised / priced follow-on lines stay separate items
  - line after a heading is never a continuation

  Sections:
  - header spans; items above the first header dropped
  - catch-all section when no headers

  Debug classification:
  - classify_menu_lines line types
"""

from __future__ import annotations

from menuscan.parsers.menu_grammar import (
    DEFAULT_SECTION,
    build_line_items,
    capitalize_words,
    classify_menu_lines,
    clean_category_name,
    find_restaurant_name,
    group_by_headers,
    has_venue_keyword,
    is_likely_category_header,
    is_likely_menu_item,
    is_likely_restaurant_name,
    parse_item_line,
    split_lines,
)


# ==================================================================
# Segmentation
# ==================================================================

class TestSplitLines:
    def test_trims_and_drops_blank_lines(self):
        assert split_lines("  Fries $3 \n\n   \n Tea $2\n") == ["Fries $3", "Tea $2"]

    def test_empty(self):
        assert split_lines("") == []


class TestCategoryHeader:
    def test_vocabulary_word(self):
        assert is_likely_category_header("Appetizers")
        assert is_likely_category_header("Our Desserts:")

    def test_all_caps_line(self):
        assert is_likely_category_header("HOUSE FAVORITES")

    def test_all_caps_with_digit_is_not_header(self):
        assert not is_likely_category_header("TABLE 12")

    def test_all_caps_too_short(self):
        assert not is_likely_category_header("ABC")

    def test_priced_line_is_never_header(self):
        assert not is_likely_category_header("SWEET POTATO FRIES $4.99")
        assert not is_likely_category_header("Classic French Fries - crispy golden fries $3.99")

    def test_plain_item_name(self):
        assert not is_likely_category_header("Classic Burger")

    def test_clean_category_name(self):
        assert clean_category_name("*** DESSERTS ***") == "Desserts"


class TestRestaurantName:
    def test_venue_keyword(self):
        assert is_likely_restaurant_name("Crispy Spuds Restaurant", 0)

    def test_title_case_words(self):
        assert is_likely_restaurant_name("The Golden Fork", 1)

    def test_only_first_three_lines(self):
        assert not is_likely_restaurant_name("The Golden Fork", 3)

    def test_price_disqualifies(self):
        assert not is_likely_restaurant_name("Golden Grill $5", 0)

    def test_header_disqualifies(self):
        assert not is_likely_restaurant_name("DESSERTS", 0)

    def test_venue_terms_extend_keywords(self):
        assert not is_likely_restaurant_name("crispy spuds", 0)
        assert is_likely_restaurant_name("crispy spuds", 0, venue_terms=("spuds",))

    def test_has_venue_keyword(self):
        assert has_venue_keyword("Bob's Grill")
        assert has_venue_keyword("crispy spuds diner", venue_terms=("spuds",))
        assert not has_venue_keyword("Garlic Bread")

    def test_find_restaurant_name(self):
        lines = ["FRIES", "Bob's Grill", "Tea $2"]
        assert find_restaurant_name(lines) == ("Bob's Grill", 1)
        assert find_restaurant_name(["FRIES"]) == ("", None)


class TestMenuItemPredicate:
    def test_priced_line(self):
        assert is_likely_menu_item("Fries $3")

    def test_short_capitalised_name(self):
        assert is_likely_menu_item("Burger")

    def test_too_short(self):
        assert not is_likely_menu_item("Tea")

    def test_lowercase_sentence(self):
        assert not is_likely_menu_item("served with a side of slaw")

    def test_header(self):
        assert not is_likely_menu_item("DESSERTS")


# ==================================================================
# Item building
# ==================================================================

class TestParseItemLine:
    def test_dash_split_with_price(self):
        d = parse_item_line("Classic French Fries - crispy golden fries $3.99", 4)
        assert d is not None
        assert d.name == "Classic French Fries"
        assert d.description == "crispy golden fries"
        assert d.price == 3.99
        assert d.line_index == 4
        assert d.source_text == "Classic French Fries - crispy golden fries $3.99"

    def test_colon_split(self):
        d = parse_item_line("grilled salmon: lemon butter sauce $18")
        assert d.name == "Grilled Salmon"
        assert d.description == "lemon butter sauce"
        assert d.price == 18.0

    def test_unpriced_item(self):
        d = parse_item_line("Veggie Wrap")
        assert d.name == "Veggie Wrap"
        assert d.price is None
        assert d.description is None

    def test_lowest_price_used(self):
        d = parse_item_line("Wings Small $8.99 Large $15.99")
        assert d.price == 8.99

    def test_rejects_price_only(self):
        assert parse_item_line("$4.99") is None

    def test_rejects_numeric(self):
        assert parse_item_line("12 34") is None

    def test_rejects_page_furniture(self):
        assert parse_item_line("Call us for delivery") is None
        assert parse_item_line("Page 2 of 3") is None
        assert parse_item_line("Lunch Menu") is None

    def test_rejects_one_char_name(self):
        assert parse_item_line("X - big plate $5") is None

    def test_capitalize_words_keeps_apostrophes(self):
        assert capitalize_words("CHEF'S special") == "Chef's Special"


# ==================================================================
# Continuation policy
# ==================================================================

class TestContinuation:
    def test_continuation_present(self):
        lines = [
            "Classic Burger $9.99",
            "with lettuce, tomato and pickles",
            "Veggie Wrap $8.50",
        ]
        drafts = build_line_items(lines)
        assert [d.name for d in drafts] == ["Classic Burger", "Veggie Wrap"]
        assert drafts[0].description == "with lettuce tomato and pickles"
        assert "pickles" in drafts[0].source_text

    def test_continuation_appends_to_existing_description(self):
        drafts = build_line_items([
            "Club Sandwich - turkey $11",
            "and crispy bacon on sourdough",
        ])
        assert len(drafts) == 1
        assert drafts[0].description == "turkey and crispy bacon on sourdough"

    def test_continuation_absent(self):
        lines = ["Classic Burger $9.99", "Veggie Wrap", "Side Salad $4"]
        drafts = build_line_items(lines)
        assert [d.name for d in drafts] == ["Classic Burger", "Veggie Wrap", "Side Salad"]
        assert drafts[0].description is None
        assert drafts[1].price is None

    def test_priced_follow_on_line_is_own_item(self):
        drafts = build_line_items(["Fries $3", "onion rings $4"])
        assert len(drafts) == 2

    def test_line_after_heading_is_not_continuation(self):
        drafts = build_line_items(["DESSERTS", "served warm with ice cream"])
        assert len(drafts) == 1
        assert drafts[0].name == "Served Warm With Ice Cream"

    def test_skip_indexes(self):
        drafts = build_line_items(["The Golden Fork", "Burger $9"], skip=(0,))
        assert [d.name for d in drafts] == ["Burger"]


# ==================================================================
# Sections
# ==================================================================

class TestGroupByHeaders:
    def test_header_spans(self):
        lines = ["APPETIZERS", "Wings $8", "Nachos $7", "DESSERTS", "Pie $4"]
        sections = group_by_headers(lines, build_line_items(lines))
        assert [(name, [d.name for d in ds]) for name, ds in sections] == [
            ("Appetizers", ["Wings", "Nachos"]),
            ("Desserts", ["Pie"]),
        ]

    def test_no_headers_catch_all(self):
        lines = ["Burger $9", "Fries $3"]
        sections = group_by_headers(lines, build_line_items(lines))
        assert len(sections) == 1
        assert sections[0][0] == DEFAULT_SECTION
        assert len(sections[0][1]) == 2

    def test_items_before_first_header_dropped(self):
        lines = ["Welcome to our place", "Daily Soup $4.50", "DRINKS", "Iced Tea $2.50"]
        sections = group_by_headers(lines, build_line_items(lines))
        assert [(name, [d.name for d in ds]) for name, ds in sections] == [
            ("Drinks", ["Iced Tea"]),
        ]

    def test_empty_sections_skipped(self):
        lines = ["STARTERS", "MAINS", "Steak Frites $24"]
        sections = group_by_headers(lines, build_line_items(lines))
        assert [name for name, _ in sections] == ["Mains"]

    def test_nothing_to_group(self):
        assert group_by_headers([], []) == []


class TestClassifyMenuLines:
    def test_line_types(self):
        text = "Crispy Spuds Restaurant\nFRIES\nCurly Fries $4.99\nask about our sauces"
        kinds = [c.line_type for c in classify_menu_lines(text)]
        assert kinds == ["restaurant_name", "heading", "menu_item", "other"]
