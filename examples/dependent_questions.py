"""A Birocrat driver for question lists where select options lead to follow-up questions.

Questions come from the ``questions`` form parameter (see
``dependent_questions.json``). A select question's ``options`` may be a list of
strings, or a mapping from each option to the questions that follow when it is
picked. Two extra kinds are validated here before Birocrat ever sees them:
``number`` and ``one_ten``.

    birocrat run examples/dependent_questions.py --params-file examples/dependent_questions.json
"""

CUSTOM_KINDS = ("number", "one_ten")


def build_tree(raw_questions, parent=None, tree=None):
    """Flatten nested questions into a table keyed by id, linking each to the next one."""
    tree = {} if tree is None else tree
    for index, raw in enumerate(raw_questions):
        node = dict(raw)
        following = raw_questions[index + 1] if index + 1 < len(raw_questions) else None
        node["next"] = following["id"] if following else None
        node["parent"] = parent

        if node["type"] == "select":
            options = node["options"]
            if isinstance(options, list):
                node["options"] = {option: None for option in options}
            else:
                node["options"] = {}
                for option, dependents in options.items():
                    if dependents:
                        node["options"][option] = dependents[0]["id"]
                        build_tree(dependents, node["id"], tree)
                    else:
                        node["options"][option] = None
        tree[node["id"]] = node
    return tree


def question(state):
    node = state["questions"][state["active"]]
    shown = {"id": node["id"], "type": node["type"], "text": node["text"]}
    if "default" in node:
        shown["default"] = node["default"]
    if node["type"] == "select":
        shown["options"] = list(node["options"])
        shown["multiple"] = node.get("multiple", False)
    elif node["type"] in CUSTOM_KINDS:
        # Take a string and validate it when answered
        shown["type"] = "simple"
    return ("question", shown, state)


def next_question_id(tree, node):
    while node is not None:
        if node["next"] is not None:
            return node["next"]
        node = tree[node["parent"]] if node["parent"] is not None else None
    return None


def main(state, answer, params):
    if state is None:
        raw_questions = params["questions"]
        state = {
            "active": raw_questions[0]["id"],
            "questions": build_tree(raw_questions),
            "answers": {},
        }
        return question(state)

    node = state["questions"][state["active"]]
    if node["type"] == "select":
        if node.get("multiple", False):
            # Multi-selects cannot lead to follow-up questions
            state["answers"][node["id"]] = list(answer.options)
        else:
            choice = answer.options[0]
            state["answers"][node["id"]] = choice
            follow_up = node["options"].get(choice)
            if follow_up is not None:
                state["active"] = follow_up
                return question(state)
    elif node["type"] == "number":
        try:
            float(answer.text)
        except ValueError:
            return ("error", "Please enter a number")
        state["answers"][node["id"]] = answer.text
    elif node["type"] == "one_ten":
        try:
            value = float(answer.text)
        except ValueError:
            value = None
        if value is None or not 1 <= value <= 10:
            return ("error", "Please enter a number between 1 and 10")
        state["answers"][node["id"]] = answer.text
    else:
        state["answers"][node["id"]] = answer.text

    upcoming = next_question_id(state["questions"], node)
    if upcoming is None:
        return ("done", state["answers"])
    state["active"] = upcoming
    return question(state)
