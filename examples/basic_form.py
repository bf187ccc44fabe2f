"""A small Birocrat driver: name, age, favourite cuisine and, for some cuisines, spice levels.

Run it with::

    birocrat run examples/basic_form.py --param id=37
"""

QUESTIONS = {
    1: {"id": 1, "type": "simple", "text": "What is your name, user {id}?"},
    2: {"id": 2, "type": "simple", "text": "How old are you, {name}?", "default": "30"},
    3: {
        "id": 3,
        "type": "select",
        "text": "What is your favourite type of cuisine?",
        "options": ["Indian", "Korean", "Japanese", "Chinese", "Italian"],
    },
    4: {
        "id": 4,
        "type": "select",
        "text": "What levels of spice can you tolerate?",
        "options": ["Mild", "Medium", "Hot", "Very Hot", "Extreme Hot"],
        "multiple": True,
    },
}
SPICY_CUISINES = ("Indian", "Korean")


def ask(question_id, state, **fields):
    question = dict(QUESTIONS[question_id])
    question["text"] = question["text"].format(**fields)
    return ("question", question, state)


def main(state, answer, params):
    if state is None:
        return ask(1, {"question": 1}, id=params.get("id", "?"))

    if state["question"] == 1:
        state["name"] = answer.text
        state["question"] = 2
        return ask(2, state, name=state["name"])

    if state["question"] == 2:
        try:
            state["age"] = int(answer.text)
        except ValueError:
            return ("error", "Please enter a valid number.")
        state["question"] = 3
        return ask(3, state)

    if state["question"] == 3:
        state["favourite_cuisine"] = answer.options[0]
        if state["favourite_cuisine"] not in SPICY_CUISINES:
            return ("done", {key: state[key] for key in ("name", "age", "favourite_cuisine")})
        state["question"] = 4
        return ask(4, state)

    state["spice_levels"] = list(answer.options)
    return ("done", {key: state[key] for key in ("name", "age", "favourite_cuisine", "spice_levels")})
