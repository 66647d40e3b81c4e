"""Boilerplate code for a tqdm progress bar."""

from tqdm import tqdm


def progress_bar(display, total, description):
    """Get a tqdm progress bar interface.

    Args:
        display (bool):
            if false the returned bar is disabled and prints nothing.
        total (int):
            the total size of the progress bar.
        description (str):
            description to print in progress bar.
    """
    return tqdm(total=total, desc=description, disable=not display)
