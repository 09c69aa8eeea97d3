from netexport.export.exceptions import CommentsRequiredError


def validate_comments(comments: str) -> str:
    """Return `comments` unchanged, or raise CommentsRequiredError if empty.

    Only the exact empty string is rejected; whitespace counts as content.
    """
    if comments == '':
        raise CommentsRequiredError()
    return comments
