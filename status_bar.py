import os
import time


def render_tabs(names, active_index, width):
    parts = []
    for idx, name in enumerate(names):
        parts.append(f"[{name}]" if idx == active_index else f" {name} ")
    return " ".join(parts).ljust(width)[:width]


def render_status(context, width):
    """
    context keys: status_msg, status_until, editing, edit_address, edit_buffer,
                  selection_label, selection_summary, file_path, sheet_shape,
                  window, ai_mode
    """
    text = ""
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    elif context.get("editing"):
        text = f" EDIT {context.get('edit_address', '')} | {context.get('edit_buffer', '')}"
    else:
        mode = "AI" if context.get("ai_mode") else "GRID"
        fname = context.get("file_path") or ""
        if fname:
            fname = os.path.basename(fname)
        label = context.get("selection_label") or "-"
        summary = context.get("selection_summary")
        if summary:
            label = f"{label} {summary}"
        shape = context.get("sheet_shape", "")
        window = context.get("window")
        rows_info = ""
        if window is not None and len(window):
            rows_info = f" | rows {window.start_row + 1}-{window.end_row}"
        text = f" {mode} | {fname} | {label} | {shape}{rows_info}"

    return text.ljust(width)[:width]
