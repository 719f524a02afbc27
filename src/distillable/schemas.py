# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Pydantic model of the feature map.

Fields are snake_case with the camelCase feature names as aliases, so a
map from ``extract_features`` validates directly and ``model_dump(by_alias=True)``
round-trips to the same keys. Unknown keys are ignored; missing keys take
the same defaults the assembler uses.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Area ratios: [0, 1], or 2 when the category has no containers
# ---------------------------------------------------------------------------

_RATIO = {"ge": 0.0, "le": 2.0}


class PageFeatures(BaseModel):
    """Article-likeness features of one rendered page."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # --- structured data ---
    opengraph: bool = Field(False, description="og:type is 'article'")
    schema_org_types: dict[str, int] = Field(default_factory=dict, alias="schemaOrgTypes")
    schema_org_article: bool = Field(False, alias="schemaOrgArticle")
    schema_org_news: bool = Field(False, alias="schemaOrgNews")
    schema_org_blog: bool = Field(False, alias="schemaOrgBlog")
    schema_org_posting: bool = Field(False, alias="schemaOrgPosting")
    schema_org_all_article: bool = Field(False, alias="schemaOrgAllArticle")
    schema_org_person: bool = Field(False, alias="schemaOrgPerson")
    schema_org_image: bool = Field(False, alias="schemaOrgImage")
    schema_org_org: bool = Field(False, alias="schemaOrgOrg")
    schema_org_count: int = Field(0, ge=0, alias="schemaOrgCount", description="Microdata items with a type")
    schema_org_length: int = Field(0, ge=0, alias="schemaOrgLength", description="Distinct microdata types")
    twitter_type: str = Field("", alias="twitterType", description="twitter:card content")
    twitter_summary: bool = Field(False, alias="twitterSummary")
    twitter_app: bool = Field(False, alias="twitterApp")

    # --- page ---
    url: str = ""
    title: str = ""
    body_width: int = Field(0, ge=0, alias="bodyWidth")
    body_height: int = Field(0, ge=0, alias="bodyHeight")
    inner_text: str = Field("", alias="innerText")
    text_content: str = Field("", alias="textContent")
    inner_html: str = Field("", alias="innerHTML")

    # --- element counts ---
    num_elements: int = Field(0, ge=0, alias="numElements")
    num_anchors: int = Field(0, ge=0, alias="numAnchors")
    num_forms: int = Field(0, ge=0, alias="numForms")
    num_text_input: int = Field(0, ge=0, alias="numTextInput")
    num_password_input: int = Field(0, ge=0, alias="numPasswordInput")
    num_ppre: int = Field(0, ge=0, alias="numPPRE")
    num_br: int = Field(0, ge=0, alias="numBr")
    num_h1: int = Field(0, ge=0, alias="numH1")
    num_h2: int = Field(0, ge=0, alias="numH2")
    num_h3: int = Field(0, ge=0, alias="numH3")
    num_h4: int = Field(0, ge=0, alias="numH4")
    visible_elements: int = Field(0, ge=0, alias="visibleElements")
    visible_anchors: int = Field(0, ge=0, alias="visibleAnchors")
    visible_ppre: int = Field(0, ge=0, alias="visiblePPRE")

    # --- structural containers ---
    num_section: int = Field(0, ge=0, alias="numSection")
    num_section_leaf: int = Field(0, ge=0, alias="numSectionLeaf")
    num_section2: int = Field(0, ge=0, alias="numSection2")
    num_section3: int = Field(0, ge=0, alias="numSection3")
    largest_section: float = Field(2.0, ge=0.0, alias="largestSection")
    largest_section_ratio: float = Field(2.0, alias="largestSectionRatio", **_RATIO)
    num_article: int = Field(0, ge=0, alias="numArticle")
    num_article_leaf: int = Field(0, ge=0, alias="numArticleLeaf")
    num_article2: int = Field(0, ge=0, alias="numArticle2")
    num_article3: int = Field(0, ge=0, alias="numArticle3")
    largest_article: float = Field(2.0, ge=0.0, alias="largestArticle")
    largest_article_ratio: float = Field(2.0, alias="largestArticleRatio", **_RATIO)
    num_entries: int = Field(0, ge=0, alias="numEntries")
    num_entries_leaf: int = Field(0, ge=0, alias="numEntriesLeaf")
    num_entries2: int = Field(0, ge=0, alias="numEntries2")
    num_entries3: int = Field(0, ge=0, alias="numEntries3")
    largest_entry: float = Field(2.0, ge=0.0, alias="largestEntry")
    largest_entry_ratio: float = Field(2.0, alias="largestEntryRatio", **_RATIO)

    # --- text density ---
    moz_score: float = Field(0.0, ge=0.0, alias="mozScore")
    moz_score_linear: float = Field(0.0, ge=0.0, alias="mozScoreLinear")
    moz_score_all_sqrt: float = Field(0.0, ge=0.0, alias="mozScoreAllSqrt")
    moz_score_all_linear: float = Field(0.0, ge=0.0, alias="mozScoreAllLinear")
    moz_score2: float = Field(0.0, ge=0.0, alias="mozScore2")
    moz_score3: float = Field(0.0, ge=0.0, alias="mozScore3")
    moz_score4: float = Field(0.0, ge=0.0, alias="mozScore4")

    # --- paging ---
    next_page_link: str = Field("", alias="nextPageLink")
    prev_page_link: str = Field("", alias="prevPageLink")
    has_next_page: bool = Field(False, alias="hasNextPage")
    has_prev_page: bool = Field(False, alias="hasPrevPage")
