"""Tests for the License model."""

import pytest
from pydantic import ValidationError

from license_bundler.models.license import (
    KnownLicense,
    License,
    LicenseKind,
    slugify,
)


class TestSlugify:
    """Tests for slugify."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("LICENSE-APACHE.txt", "license-apache-txt"),
            ("Apache-2.0", "apache-2-0"),
            ("Apache-2.0 WITH LLVM-exception", "apache-2-0-with-llvm-exception"),
            ("  COPYING  ", "copying"),
            ("LICENSE__MIT..md", "license-mit-md"),
        ],
    )
    def test_slugify(self, value: str, expected: str) -> None:
        """Test that non-alphanumeric runs collapse to a single dash."""
        assert slugify(value) == expected


class TestLicenseConstructors:
    """Tests for License constructors and display strings."""

    def test_default_is_unspecified(self) -> None:
        """Test that a bare License is unspecified."""
        assert License().kind == LicenseKind.UNSPECIFIED
        assert License() == License.unspecified()

    def test_known_display(self) -> None:
        """Test that a known license displays its SPDX identifier."""
        assert str(License.of(KnownLicense.MIT)) == "MIT"
        assert (
            str(License.of(KnownLicense.APACHE_2_0_WITH_LLVM_EXCEPTION))
            == "Apache-2.0 WITH LLVM-exception"
        )

    def test_custom_display(self) -> None:
        """Test that a custom license displays its text."""
        assert str(License.custom("Proprietary")) == "Proprietary"

    def test_file_display(self) -> None:
        """Test that a file license describes the file."""
        lic = License.file("$SITE_PACKAGES/demo/LICENSE")
        assert str(lic) == "License specified in file ($SITE_PACKAGES/demo/LICENSE)"

    def test_unspecified_display(self) -> None:
        """Test that an unspecified license says so."""
        assert str(License.unspecified()) == "No license specified"

    def test_multiple_display(self) -> None:
        """Test that alternatives are joined with a slash."""
        lic = License.alternatives(
            [License.of(KnownLicense.MIT), License.of(KnownLicense.APACHE_2_0)]
        )
        assert str(lic) == "MIT / Apache-2.0"

    def test_is_immutable(self) -> None:
        """Test that License values cannot be modified."""
        lic = License.of(KnownLicense.MIT)
        with pytest.raises(ValidationError):
            lic.kind = LicenseKind.CUSTOM  # type: ignore[misc]

    def test_is_hashable(self) -> None:
        """Test that equal licenses hash equally."""
        assert len({License.of(KnownLicense.MIT), License.of(KnownLicense.MIT)}) == 1


class TestAlternatives:
    """Tests for License.alternatives."""

    def test_flattens_nested_alternatives(self) -> None:
        """Test that nested alternatives are flattened."""
        mit = License.of(KnownLicense.MIT)
        apache = License.of(KnownLicense.APACHE_2_0)
        isc = License.of(KnownLicense.ISC)
        lic = License.alternatives([License.alternatives([mit, apache]), isc])
        assert lic.members == (mit, apache, isc)

    def test_deduplicates_keeping_first_seen_order(self) -> None:
        """Test that duplicates are dropped in first-seen order."""
        mit = License.of(KnownLicense.MIT)
        apache = License.of(KnownLicense.APACHE_2_0)
        lic = License.alternatives([apache, mit, apache, mit])
        assert lic.members == (apache, mit)

    def test_single_survivor_is_returned(self) -> None:
        """Test that one distinct license is not wrapped."""
        mit = License.of(KnownLicense.MIT)
        assert License.alternatives([mit, mit]) == mit

    def test_empty_raises(self) -> None:
        """Test that no alternatives is an error."""
        with pytest.raises(ValueError):
            License.alternatives([])


class TestTemplate:
    """Tests for License.template."""

    def test_known_license_has_template(self) -> None:
        """Test that MIT has an embedded template."""
        template = License.of(KnownLicense.MIT).template
        assert template is not None
        assert "Permission is hereby granted" in template

    def test_or_later_shares_template(self) -> None:
        """Test that -or-later variants use the same license body."""
        assert (
            License.of(KnownLicense.GPL_2_0_PLUS).template
            == License.of(KnownLicense.GPL_2_0).template
        )

    def test_license_without_template(self) -> None:
        """Test that licenses without an embedded body return None."""
        assert License.of(KnownLicense.X11).template is None
        assert License.custom("Proprietary").template is None
        assert License.unspecified().template is None

    def test_multiple_template_raises(self) -> None:
        """Test that a multiple license has no single template."""
        lic = License.alternatives(
            [License.of(KnownLicense.MIT), License.of(KnownLicense.APACHE_2_0)]
        )
        with pytest.raises(ValueError):
            _ = lic.template


class TestSynonyms:
    """Tests for License.synonyms."""

    def test_apache_synonyms_longest_first(self) -> None:
        """Test Apache-2.0 synonyms and their order."""
        synonyms = License.of(KnownLicense.APACHE_2_0).synonyms()
        assert set(synonyms) == {"apache-2-0", "apache", "apache2", "apache-2"}
        assert synonyms[0] == "apache-2-0"
        assert synonyms[-1] == "apache"
        assert [len(s) for s in synonyms] == sorted(
            (len(s) for s in synonyms), reverse=True
        )

    def test_boost_synonym(self) -> None:
        """Test that BSL-1.0 also matches boost."""
        assert "boost" in License.of(KnownLicense.BSL_1_0).synonyms()

    def test_plain_synonym(self) -> None:
        """Test that MIT only has its slugified name."""
        assert License.of(KnownLicense.MIT).synonyms() == ["mit"]


class TestOrdering:
    """Tests for the License total order."""

    def test_known_before_custom(self) -> None:
        """Test that known licenses sort before custom ones."""
        custom = License.custom("AAA")
        mit = License.of(KnownLicense.MIT)
        assert sorted([custom, mit]) == [mit, custom]

    def test_known_sorted_by_identifier(self) -> None:
        """Test that known licenses sort by their SPDX identifier."""
        mit = License.of(KnownLicense.MIT)
        apache = License.of(KnownLicense.APACHE_2_0)
        bsd = License.of(KnownLicense.BSD_3_CLAUSE)
        assert sorted([mit, bsd, apache]) == [apache, bsd, mit]
