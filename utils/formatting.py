IPFS_PREFIX = 'ipfs://'


def format_content_hash(content_hash):
    """Add the ipfs:// prefix to a bare content hash"""
    if not content_hash:
        return content_hash
    return content_hash if content_hash.startswith(IPFS_PREFIX) else f"{IPFS_PREFIX}{content_hash}"


def addresses_equal(first, second):
    """Compare two hex addresses ignoring checksum casing"""
    if not first or not second:
        return False
    return first.lower() == second.lower()


def short_address(address):
    """Shorten an address for log lines"""
    if not address or len(address) < 12:
        return address
    return f"{address[:6]}...{address[-4:]}"
