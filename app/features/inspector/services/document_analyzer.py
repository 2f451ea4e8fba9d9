from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from app.features.inspector.schemas.inspect import ImageCandidate, ImageSource, ParsedDocument
from app.platform.logger import get_logger

logger = get_logger("document_analyzer")


class DocumentAnalyzer:
    """
    Turns raw HTML into a ParsedDocument.
    Uses the permissive stdlib-backed parser so broken markup degrades to empty fields.
    """

    # Priority order matters: the first non-empty candidate is used as the preview image
    IMAGE_SELECTORS: Tuple[Tuple[ImageSource, str, str], ...] = (
        (ImageSource.OG_IMAGE, 'meta[property="og:image"]', "content"),
        (ImageSource.TWITTER_IMAGE, 'meta[name="twitter:image"]', "content"),
        (ImageSource.APPLE_TOUCH_ICON, 'link[rel="apple-touch-icon"]', "href"),
        (ImageSource.ICON, 'link[rel="icon"]', "href"),
        (ImageSource.SHORTCUT_ICON, 'link[rel="shortcut icon"]', "href"),
    )

    EXCLUDED_TAGS = ["script", "style", "nav", "footer", "aside"]
    TEXT_TAGS = ["h1", "h2", "h3", "p", "li"]

    @staticmethod
    def analyze(html: Optional[str], base_url: str) -> ParsedDocument:
        try:
            soup = BeautifulSoup(html or "", "html.parser")

            title_tag = soup.find("title")
            title = title_tag.get_text(strip=True) if title_tag else ""

            image_candidates = DocumentAnalyzer._extract_image_candidates(soup)
            link_data = DocumentAnalyzer._classify_links(soup, base_url)

            # Text extraction is destructive, it must run after links are counted
            text_blocks = DocumentAnalyzer._extract_text_blocks(soup)
        except Exception as e:
            logger.warning(f"Could not parse HTML for {base_url}: {e}")
            return ParsedDocument()

        logger.info(
            f"Analyzed {base_url}: {link_data['total_anchors']} anchors, "
            f"{len(image_candidates)} image candidates, {len(text_blocks)} text blocks"
        )
        return ParsedDocument(
            title=title,
            image_candidates=image_candidates,
            text_blocks=text_blocks,
            **link_data,
        )

    @staticmethod
    def _extract_image_candidates(soup: BeautifulSoup) -> Tuple[ImageCandidate, ...]:
        candidates = []
        for source, selector, attribute in DocumentAnalyzer.IMAGE_SELECTORS:
            element = soup.select_one(selector)
            if element is None:
                continue
            ref = (element.get(attribute) or "").strip()
            if ref:
                candidates.append(ImageCandidate(source=source, ref=ref))
        return tuple(candidates)

    @staticmethod
    def classify_href(href: str, base_url: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Classify one raw href against the page origin.

        Returns:
            ("internal", absolute_url), ("external", href) or (None, None) when the
            href is neither absolute http(s) nor root-relative
        """
        if href.startswith("http"):
            if href.startswith(base_url):
                return "internal", href
            return "external", href
        if href.startswith("/"):
            return "internal", f"{base_url}{href}"
        return None, None

    @staticmethod
    def _classify_links(soup: BeautifulSoup, base_url: str) -> Dict:
        anchors = soup.find_all("a")
        raw_links: Dict[str, None] = {}
        internal_links: Dict[str, None] = {}
        internal_count = 0
        external_count = 0

        for anchor in anchors:
            href = anchor.get("href")
            if not href:
                continue
            raw_links[href] = None

            kind, target = DocumentAnalyzer.classify_href(href, base_url)
            if kind == "internal":
                internal_count += 1
                internal_links[target] = None
            elif kind == "external":
                external_count += 1

        return {
            "links": tuple(raw_links),
            "internal_links": tuple(internal_links),
            "total_anchors": len(anchors),
            "internal_count": internal_count,
            "external_count": external_count,
        }

    @staticmethod
    def _extract_text_blocks(soup: BeautifulSoup) -> Tuple[str, ...]:
        for element in soup.find_all(DocumentAnalyzer.EXCLUDED_TAGS):
            # nested matches are already gone with their ancestor
            if not element.decomposed:
                element.decompose()

        blocks: List[str] = []
        for tag in DocumentAnalyzer.TEXT_TAGS:
            blocks.extend(el.get_text().strip() for el in soup.find_all(tag))
        return tuple(blocks)
