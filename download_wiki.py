import bz2
import os
import sys
from contextlib import contextmanager

import requests
from tqdm import tqdm  # This gives us progress bars

# Simple English Wikipedia is much smaller (good for experimentation)
# Full dataset would be: https://dumps.wikimedia.org/enwiki/latest/enwiki-latest-pages-articles.xml.bz2
SIMPLEWIKI_DUMP_URL = "https://dumps.wikimedia.org/simplewiki/latest/simplewiki-latest-pages-articles.xml.bz2"


def download_file(url, target_path, block_size=1024 * 1024):
    """Download a file with a progress bar"""
    # Create directory if it doesn't exist
    target_dir = os.path.dirname(target_path)
    if target_dir:
        os.makedirs(target_dir, exist_ok=True)

    # Check if file already exists
    if os.path.exists(target_path):
        print(f"File already exists: {target_path}", file=sys.stderr)
        return target_path

    print(f"Downloading {url} to {target_path}", file=sys.stderr)
    response = requests.get(url, stream=True, timeout=60)
    response.raise_for_status()

    # Get file size for progress bar
    total_size = int(response.headers.get('content-length', 0))

    # Write to a partial file so an interrupted download isn't mistaken for a
    # finished one next time
    partial_path = target_path + ".part"
    with open(partial_path, 'wb') as file, tqdm(
            desc=os.path.basename(target_path),
            total=total_size,
            unit='B',
            unit_scale=True,
            unit_divisor=1024,
        ) as bar:

        for data in response.iter_content(block_size):
            bar.update(len(data))
            file.write(data)

    os.replace(partial_path, target_path)
    print(f"Download complete: {target_path}", file=sys.stderr)
    return target_path


@contextmanager
def open_dump(path):
    """
    Open a MediaWiki XML dump for reading as bytes.

    `path` may be a plain .xml file, a .bz2 compressed dump, or "-" for
    standard input. Standard input is left open afterwards.
    """
    if path == "-":
        yield sys.stdin.buffer
        return

    if path.endswith(".bz2"):
        dump = bz2.open(path, "rb")
    else:
        dump = open(path, "rb")
    try:
        yield dump
    finally:
        dump.close()


if __name__ == "__main__":
    download_file(SIMPLEWIKI_DUMP_URL, "data/simplewiki-latest-pages-articles.xml.bz2")
