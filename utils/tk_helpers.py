import tkinter as tk


def unbind_handler(widget: tk.Misc, sequence: str, funcid: str) -> None:
    """Remove one handler added with bind(..., add="+"), keeping the others.

    Misc.unbind(sequence, funcid) clears the whole sequence before Python 3.13.
    """
    script = widget.tk.call("bind", str(widget), sequence)
    kept = "\n".join(line for line in str(script).split("\n") if funcid not in line)
    widget.tk.call("bind", str(widget), sequence, kept)
    widget.deletecommand(funcid)
