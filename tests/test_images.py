"""Tests for profile image discovery."""

from bs4 import BeautifulSoup

from substack_twin.images import (
    image_from_img_tags,
    image_from_json_ld,
    image_from_og_meta,
    image_from_pictures,
    locate_profile_image,
    score_img_tag,
    score_picture,
)

BASE = "https://jane.substack.com/"

POST_PICTURE = '<picture><img src="/images/post-cover.png" alt="cover art"></picture>'
AVATAR_PICTURE = (
    "<picture>"
    '<source type="image/webp" srcset="/a-112.webp 112w, /a-424.webp 424w">'
    '<img class="pub-avatar" alt="Jane Doe avatar" src="/a-112.png" width="112">'
    "</picture>"
)
OG_META = '<meta property="og:image" content="https://substackcdn.com/og.png">'


def _soup(html):
    return BeautifulSoup(html, "html.parser")


def _first(html, name):
    return _soup(html).find(name)


class TestScoring:
    """Tests for picture and img scoring."""

    def test_score_img_tag(self):
        img = _first('<img src="x.png" alt="Jane avatar" width="112">', "img")

        # keyword 3 + alt avatar 3 + name 2 + size hint 1
        assert score_img_tag(img, "Jane") == 9

    def test_score_img_tag_unquoted_attributes(self):
        img = _first("<img class=avatar src=/me.png width=112>", "img")

        # keyword 3 + size hint 1
        assert score_img_tag(img) == 4

    def test_score_img_tag_without_signals(self):
        assert score_img_tag(_first('<img src="/logo.png" alt="Logo">', "img"), "Jane") == 0

    def test_score_picture_caps_source_bonus(self):
        block = _first(
            '<picture><source srcset="a 1x"><source srcset="b 2x"><source srcset="c 3x">'
            '<img alt="avatar"></picture>',
            "picture",
        )

        # keyword 3 + alt avatar 4 + sources capped at 2
        assert score_picture(block) == 9

    def test_score_picture_sizes_hint(self):
        block = _first('<picture><img sizes="112px" src="x.png"></picture>', "picture")

        assert score_picture(block) == 2


class TestPictureTier:
    """Tests for image_from_pictures."""

    def test_highest_scoring_picture_wins(self):
        html = POST_PICTURE + AVATAR_PICTURE

        assert image_from_pictures(_soup(html), BASE, "Jane Doe") == "https://jane.substack.com/a-112.png"

    def test_equal_scores_keep_document_order(self):
        html = '<picture><img src="/one.png"></picture><picture><img src="/two.png"></picture>'

        assert image_from_pictures(_soup(html), BASE) == "https://jane.substack.com/one.png"

    def test_img_srcset_preferred_over_src(self):
        html = '<picture><img srcset="/s-100.png 100w, /s-300.png 300w" src="/s.png"></picture>'

        assert image_from_pictures(_soup(html), BASE) == "https://jane.substack.com/s-300.png"

    def test_source_srcset_when_no_img(self):
        html = '<picture><source srcset="/only-400.webp 400w"></picture>'

        assert image_from_pictures(_soup(html), BASE) == "https://jane.substack.com/only-400.webp"

    def test_entities_in_attributes_decoded(self):
        html = '<picture><img src="/a.png?w=1&amp;h=2"></picture>'

        assert image_from_pictures(_soup(html), BASE) == "https://jane.substack.com/a.png?w=1&h=2"

    def test_data_src_is_not_src(self):
        html = '<picture><img data-src="/lazy.png" src="/real.png"></picture>'

        assert image_from_pictures(_soup(html), BASE) == "https://jane.substack.com/real.png"

    def test_no_pictures(self):
        assert image_from_pictures(_soup("<div></div>"), BASE) is None


class TestImgTier:
    """Tests for image_from_img_tags."""

    def test_highest_score_wins(self):
        html = '<img src="/logo.png"><img src="/me.png" alt="author photo">'

        assert image_from_img_tags(_soup(html), BASE) == "https://jane.substack.com/me.png"

    def test_unscored_image_still_returned(self):
        html = '<img src="/logo.png"><img src="/spacer.gif">'

        assert image_from_img_tags(_soup(html), BASE) == "https://jane.substack.com/logo.png"

    def test_images_without_any_url_are_skipped(self):
        html = '<img class="avatar"><img src="/fallback.png">'

        assert image_from_img_tags(_soup(html), BASE) == "https://jane.substack.com/fallback.png"

    def test_images_inside_pictures_not_considered(self):
        html = '<picture><img class="avatar" src="/inner.png"></picture><img class="profile" src="/outer.png">'

        assert image_from_img_tags(_soup(html), BASE) == "https://jane.substack.com/outer.png"

    def test_srcset_band_selection(self):
        html = '<img class="profile" srcset="a-112.png 112w, a-424.png 424w" src="a.png">'

        assert image_from_img_tags(_soup(html), BASE) == "https://jane.substack.com/a-424.png"


class TestJsonLdTier:
    """Tests for image_from_json_ld."""

    def test_image_object(self):
        html = (
            '<script type="application/ld+json">'
            '{"@type": "Person", "image": {"url": "https://cdn.example.com/p.png"}}'
            "</script>"
        )

        assert image_from_json_ld(_soup(html), BASE) == "https://cdn.example.com/p.png"

    def test_malformed_block_is_skipped(self):
        html = (
            '<script type="application/ld+json">{not json</script>'
            '<script type="application/ld+json">{"image": "/from-second.png"}</script>'
        )

        assert image_from_json_ld(_soup(html), BASE) == "https://jane.substack.com/from-second.png"

    def test_publisher_logo(self):
        html = (
            '<script type="application/ld+json">'
            '[{"@type": "NewsArticle", "publisher": {"logo": {"url": "/logo.png"}}}]'
            "</script>"
        )

        assert image_from_json_ld(_soup(html), BASE) == "https://jane.substack.com/logo.png"

    def test_image_list(self):
        html = '<script type="application/ld+json">{"image": ["", "/second.png"]}</script>'

        assert image_from_json_ld(_soup(html), BASE) == "https://jane.substack.com/second.png"

    def test_other_scripts_ignored(self):
        html = '<script>var image = "/x.png";</script><script type="application/ld+json"></script>'

        assert image_from_json_ld(_soup(html), BASE) is None


class TestOgMetaTier:
    """Tests for image_from_og_meta."""

    def test_property_attribute(self):
        assert image_from_og_meta(_soup(OG_META), BASE) == "https://substackcdn.com/og.png"

    def test_unquoted_attributes(self):
        html = "<meta property=og:image content=https://substackcdn.com/og.png>"

        assert image_from_og_meta(_soup(html), BASE) == "https://substackcdn.com/og.png"

    def test_name_attribute(self):
        html = '<meta name="og:image" content="/og-by-name.png">'

        assert image_from_og_meta(_soup(html), BASE) == "https://jane.substack.com/og-by-name.png"

    def test_property_preferred_over_name(self):
        html = '<meta name="og:image" content="/by-name.png">' + OG_META

        assert image_from_og_meta(_soup(html), BASE) == "https://substackcdn.com/og.png"

    def test_missing_content(self):
        assert image_from_og_meta(_soup('<meta property="og:image">'), BASE) is None


class TestLocateProfileImage:
    """Tests for locate_profile_image."""

    def test_empty_html(self):
        assert locate_profile_image("", BASE) is None
        assert locate_profile_image(None, BASE) is None

    def test_picture_tier_beats_later_tiers(self):
        html = OG_META + AVATAR_PICTURE

        assert locate_profile_image(html, BASE, "Jane Doe") == "https://jane.substack.com/a-112.png"

    def test_img_tier_beats_og_image(self):
        html = "<html><head>" + OG_META + '</head><body><img src="/logo.png"></body></html>'

        assert locate_profile_image(html, BASE) == "https://jane.substack.com/logo.png"

    def test_empty_picture_falls_through_to_bare_img(self):
        html = '<picture><source type="image/webp"></picture><img src="/me.png">'

        assert locate_profile_image(html, BASE) == "https://jane.substack.com/me.png"

    def test_unquoted_img_attributes(self):
        html = "<img class=avatar src=/me.png width=112>"

        assert locate_profile_image(html, BASE) == "https://jane.substack.com/me.png"

    def test_unquoted_og_meta(self):
        html = "<meta property=og:image content=https://substackcdn.com/og.png>"

        assert locate_profile_image(html, BASE) == "https://substackcdn.com/og.png"

    def test_falls_through_to_og_image(self):
        html = "<html><head>" + OG_META + "</head><body><p>No pictures</p></body></html>"

        assert locate_profile_image(html, BASE) == "https://substackcdn.com/og.png"

    def test_nothing_found(self):
        assert locate_profile_image("<html><body><p>Hello</p></body></html>", BASE) is None
