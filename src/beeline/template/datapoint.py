# SPDX-License-Identifier: MIT

from beeline.model.datapoint import EditableDatapoint


def get_editable_datapoint_template() -> EditableDatapoint:
    return {
        "id": None,
        "timestamp": None,
        "value": None,
        "comment": None,
        "line": None,
    }
