import argparse
import multiprocessing
import sys
import xml.etree.ElementTree as ET
from contextlib import nullcontext
from itertools import islice

from tqdm import tqdm

from download_wiki import open_dump
from html_filter import filter_html
from wikitext_filter import collapse_blank_lines, filter_wikitext

# Elements whose character data fills an article field
RELEVANT_XML_TAGS = {"title": "title", "text": "text", "ns": "namespace"}

MAIN_NAMESPACE = "0"


class ExtractConfig:
    """Configuration for a dump extraction run"""
    def __init__(self):
        # Paths ("-" means standard input / standard output)
        self.input_path = "-"
        self.output_path = "-"

        # Processing
        self.num_workers = 1      # 1 keeps everything in this process
        self.batch_size = 1000    # Articles handed to the worker pool at once
        self.max_articles = None  # Stop after this many articles

        # Progress bar on stderr
        self.progress = True


class Article:
    """One <page> of the dump"""
    def __init__(self, title="", text="", namespace="", redirect=""):
        self.title = title
        self.text = text
        self.namespace = namespace
        self.redirect = redirect

    def is_content(self):
        """Main namespace and not a redirect"""
        return self.namespace == MAIN_NAMESPACE and self.redirect == ""

    def __repr__(self):
        return f"Article(title={self.title!r}, namespace={self.namespace!r})"


class FilteredText:
    """Result of filtering an article body: either text or the error that stopped it"""
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error

    @property
    def ok(self):
        return self.error is None


def local_tag(tag):
    """Tag name without the export namespace"""
    return tag.split('}')[-1]


def filter_article(raw_text):
    """Run the HTML filter, the wikitext filter and blank line collapsing"""
    try:
        text = filter_wikitext(filter_html(raw_text))
    except (IndexError, RecursionError) as e:
        return FilteredText(error=e)
    return FilteredText(text=collapse_blank_lines(text))


def read_mediawiki_xml(dump):
    """
    Yield an Article for every <page> in a MediaWiki XML export.

    All fields start empty for each page. The redirect field is set from the
    text of a <redirect> element or from its attributes (usually title=...).
    """
    article = Article()
    root = None
    context = ET.iterparse(dump, events=("start", "end"))
    for event, elem in context:
        tag = local_tag(elem.tag)

        if event == "start":
            if root is None:
                root = elem
            if tag == "page":
                article = Article()
            continue

        if tag in RELEVANT_XML_TAGS:
            setattr(article, RELEVANT_XML_TAGS[tag], elem.text or "")
        elif tag == "redirect":
            article.redirect = elem.text or "".join(elem.attrib.values())
        elif tag == "page":
            yield article
            # Clear the page, and drop it from the root, to save memory
            elem.clear()
            root.clear()


def write_article(article, result, out):
    """
    Write one article block.

    The header goes out even when filtering failed; only the body is dropped.
    """
    out.write(f"= {article.title} =\n")
    if result.ok:
        out.write(result.text + "\n")
    return result.ok


def iter_filtered(articles, num_workers=1, batch_size=1000):
    """Yield (article, FilteredText) for content articles, in dump order"""
    content = (article for article in articles if article.is_content())

    if num_workers <= 1:
        for article in content:
            yield article, filter_article(article.text)
        return

    with multiprocessing.Pool(processes=num_workers) as pool:
        while True:
            batch = list(islice(content, batch_size))
            if not batch:
                break
            # imap keeps results in the order of the batch
            results = pool.imap(filter_article, [article.text for article in batch])
            for article, result in zip(batch, results):
                yield article, result


def extract_articles(dump, out, config):
    """Filter every content article in `dump` and write it to `out`"""
    article_count = 0
    failed_count = 0

    pages = tqdm(read_mediawiki_xml(dump), desc="Parsing XML", unit=" pages",
                 disable=not config.progress)
    filtered = iter_filtered(pages, config.num_workers, config.batch_size)
    for article, result in filtered:
        if not write_article(article, result, out):
            failed_count += 1
        article_count += 1

        if config.max_articles and article_count >= config.max_articles:
            print(f"Reached maximum of {config.max_articles} articles", file=sys.stderr)
            break

    filtered.close()
    pages.close()
    return article_count, failed_count


def parse_wiki_dump(config):
    """Parse a Wikipedia XML dump and write its articles as plain text"""
    print(f"Parsing XML: {config.input_path}", file=sys.stderr)

    if config.output_path == "-":
        output = nullcontext(sys.stdout)
    else:
        output = open(config.output_path, 'w', encoding='utf-8')

    with open_dump(config.input_path) as dump, output as out:
        article_count, failed_count = extract_articles(dump, out, config)

    print(f"Extracted {article_count} articles "
          f"({failed_count} with unreadable text)", file=sys.stderr)
    return article_count


def build_config(argv=None):
    parser = argparse.ArgumentParser(
        description="Extract plain text from a MediaWiki XML dump."
    )
    parser.add_argument(
        "input", nargs="?", default="-",
        help="Dump file (.xml or .xml.bz2), or - for standard input (default)",
    )
    parser.add_argument(
        "-o", "--output", default="-",
        help="Output text file, or - for standard output (default)",
    )
    parser.add_argument(
        "-j", "--workers", type=int, default=1,
        help="Worker processes for filtering articles (default: 1)",
    )
    parser.add_argument(
        "--batch-size", type=int, default=1000,
        help="Articles sent to the workers at a time (default: 1000)",
    )
    parser.add_argument(
        "--max-articles", type=int, default=None,
        help="Stop after this many articles",
    )
    parser.add_argument(
        "--no-progress", action="store_true",
        help="Don't show a progress bar",
    )
    args = parser.parse_args(argv)

    config = ExtractConfig()
    config.input_path = args.input
    config.output_path = args.output
    config.num_workers = args.workers
    config.batch_size = args.batch_size
    config.max_articles = args.max_articles
    config.progress = not args.no_progress
    return config


def main(argv=None):
    parse_wiki_dump(build_config(argv))


if __name__ == "__main__":
    multiprocessing.freeze_support()
    main()
