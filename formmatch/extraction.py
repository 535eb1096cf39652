"""
Static HTML form extraction.

Turns the forms of a page into FieldDescriptors for the matching engine.
Labels are resolved the way a person reading the page would: explicit
``label[for]`` first, then the enclosing label, the nearest preceding
text, ARIA and placeholder text, and finally the humanized field name.
"""

from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from pipelines.matching.descriptors import FieldDescriptor, FormDescriptor

from .normalize import action_path, collapse_whitespace, humanize_name

CONTAINER_SELECTOR = "form, div[role=form], div.form, .form-container"
CONTROL_TAGS = ["input", "select", "textarea"]
EXCLUDED_INPUT_TYPES = {"submit", "button", "reset", "hidden", "image"}


def _attr(tag: Tag, name: str) -> str:
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return value


def _text_outside_controls(tag: Tag) -> str:
    parts = []
    for text in tag.find_all(string=True):
        if text.find_parent(CONTROL_TAGS + ["button"]) is not None:
            continue
        parts.append(text)
    return collapse_whitespace(" ".join(parts))


def field_type(control: Tag) -> str:
    if control.name == "select":
        return "select-multiple" if control.has_attr("multiple") else "select-one"
    if control.name == "textarea":
        return "textarea"
    return (_attr(control, "type") or "text").strip().lower()


def _option_value(option: Tag) -> str:
    if option.has_attr("value"):
        return _attr(option, "value")
    return option.get_text(strip=True)


def field_value(control: Tag, ftype: str) -> str:
    if ftype in ("checkbox", "radio"):
        if control.has_attr("checked"):
            return _attr(control, "value") or "on"
        return ""
    if control.name == "select":
        selected = control.find_all("option", selected=True)
        if selected:
            return _option_value(selected[0])
        if ftype == "select-one":
            first = control.find("option")
            return _option_value(first) if first is not None else ""
        return ""
    if control.name == "textarea":
        return control.get_text().strip()
    return _attr(control, "value")


def find_label(control: Tag, container: Tag) -> str:
    control_id = _attr(control, "id")
    if control_id:
        explicit = container.find("label", attrs={"for": control_id})
        if explicit is not None:
            text = explicit.get_text(" ", strip=True)
            if text:
                return collapse_whitespace(text)

    enclosing = control.find_parent("label")
    if enclosing is not None:
        text = _text_outside_controls(enclosing)
        if text:
            return text

    for previous in control.find_previous_siblings():
        if not isinstance(previous, Tag):
            continue
        # Text before an earlier control belongs to that control.
        if previous.name in CONTROL_TAGS or previous.find(CONTROL_TAGS) is not None:
            break
        text = previous.get_text(" ", strip=True)
        if text:
            return collapse_whitespace(text)

    aria = _attr(control, "aria-label").strip()
    if aria:
        return aria

    placeholder = _attr(control, "placeholder")
    if placeholder:
        return placeholder

    name = _attr(control, "name")
    if name:
        return humanize_name(name)
    return ""


def describe_control(control: Tag, container: Tag) -> Optional[FieldDescriptor]:
    """FieldDescriptor for one control, or None for buttons and hidden inputs."""
    ftype = field_type(control)
    if control.name == "input" and ftype in EXCLUDED_INPUT_TYPES:
        return None
    name = _attr(control, "name")
    return FieldDescriptor(
        id=_attr(control, "id") or name,
        type=ftype,
        label=find_label(control, container),
        name=name,
        placeholder=_attr(control, "placeholder"),
        css_class=_attr(control, "class"),
        value=field_value(control, ftype),
    )


def form_identifier(container: Tag, index: int, base_url: str = "") -> str:
    container_id = _attr(container, "id")
    if container_id:
        return container_id

    path = action_path(_attr(container, "action"), base_url)
    if path:
        return path

    names = sorted(
        {_attr(c, "name") for c in container.find_all(CONTROL_TAGS) if _attr(c, "name")}
    )
    if names:
        return "|".join(names)
    return f"form_{index}"


def _form_containers(soup: BeautifulSoup) -> List[Tag]:
    selected: List[Tag] = []
    seen = set()
    for candidate in soup.select(CONTAINER_SELECTOR):
        if any(id(parent) in seen for parent in candidate.parents):
            continue
        seen.add(id(candidate))
        selected.append(candidate)
    return selected


def extract_forms(html: str, base_url: str = "") -> List[FormDescriptor]:
    """Every form on the page that has at least one data-entry control."""
    soup = BeautifulSoup(html, "html.parser")
    forms: List[FormDescriptor] = []
    for index, container in enumerate(_form_containers(soup)):
        fields = []
        for control in container.find_all(CONTROL_TAGS):
            field = describe_control(control, container)
            if field is not None:
                fields.append(field)
        if fields:
            forms.append(FormDescriptor.of(form_identifier(container, index, base_url), fields))
    return forms


def filled_fields(form: FormDescriptor) -> List[FieldDescriptor]:
    """The fields carrying a value, i.e. what is worth learning."""
    return [f for f in form.fields if f.value]
