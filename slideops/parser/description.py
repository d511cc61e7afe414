"""Plain-text summary of a parsed presentation.

The summary lists every text run of the editable slide with its position,
so that an instruction interpreter can quote run texts verbatim as
``originalText`` selectors.
"""

from slideops.dsl.schema import ParsedPresentation


def describe_presentation(parsed: ParsedPresentation) -> str:
    """Summarize the first slide, theme and media of a presentation.

    Args:
        parsed: The parsed presentation.

    Returns:
        Multi-line description.
    """
    lines: list[str] = []

    slide = parsed.first_slide
    if slide is not None:
        lines.append("Text Elements (each line is a separate text run that can be translated):")
        lines.append("(Position info in inches from top-left, slide is 10x7.5 inches)")

        run_index = 1
        for element in slide.text_elements:
            pos_info = ""
            if element.position:
                pos_info = f' [at x={element.position.x:.1f}", y={element.position.y:.1f}"]'
            for run in element.text_runs:
                if run.text.strip():
                    lines.append(f'  {run_index}. "{run.text}"{pos_info}')
                    run_index += 1

        if not slide.text_elements:
            lines.append("  (No text elements found)")
        elif run_index == 1:
            lines.append("  (No text found)")

    theme = parsed.theme
    if theme is not None:
        lines.append("\nTheme:")
        if theme.name:
            lines.append(f"  Name: {theme.name}")
        if theme.font_scheme.major:
            lines.append(f"  Heading font: {theme.font_scheme.major}")
        if theme.font_scheme.minor:
            lines.append(f"  Body font: {theme.font_scheme.minor}")
        if theme.color_scheme:
            colors = list(theme.color_scheme.items())[:4]
            lines.append("  Colors: " + ", ".join(f"{slot}={value}" for slot, value in colors))

    if parsed.images:
        lines.append("\nImages: " + ", ".join(image.file_name for image in parsed.images))

    return "\n".join(lines)
