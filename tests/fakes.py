"""In-memory remote client and response builders used across the tests."""

from datetime import datetime, timezone


ANSWER_NS = (
    "http://mechanicalturk.amazonaws.com/AWSMechanicalTurkDataSchemas/"
    "2005-10-01/QuestionFormAnswers.xsd"
)


class FakeClient:
    """Remote client stub returning scripted responses.

    ``handlers`` maps an operation name either to a callable receiving the
    request parameters or to a list of responses consumed in order. A
    response that is an exception instance is raised instead of returned.
    """

    def __init__(self, handlers):
        self._handlers = dict(handlers)
        self.calls = []

    def invoke(self, operation, params):
        self.calls.append((operation, dict(params)))
        handler = self._handlers[operation]
        if callable(handler):
            result = handler(dict(params))
        else:
            result = handler.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    def calls_to(self, operation):
        return [params for name, params in self.calls if name == operation]


def paged(items_by_parent, parent_param, items_key):
    """Build a handler that pages through ``items_by_parent`` using MaxResults.

    The continuation token is the offset of the next page.
    """

    def handler(params):
        items = items_by_parent[params.get(parent_param)]
        start = int(params.get("NextToken") or 0)
        end = start + int(params["MaxResults"])
        response = {items_key: items[start:end], "NumResults": len(items[start:end])}
        if end < len(items):
            response["NextToken"] = str(end)
        return response

    return handler


def answer_document(*answers):
    """Render a QuestionFormAnswers document from ``(tag, text)`` sequences."""

    body = "".join(
        "<Answer>" + "".join(f"<{tag}>{text}</{tag}>" for tag, text in answer) + "</Answer>"
        for answer in answers
    )
    return f'<?xml version="1.0" encoding="UTF-8"?><QuestionFormAnswers xmlns="{ANSWER_NS}">{body}</QuestionFormAnswers>'


def make_assignment(assignment_id, hit_id="HIT1", worker_id="W1", **fields):
    assignment = {
        "AssignmentId": assignment_id,
        "WorkerId": worker_id,
        "HITId": hit_id,
        "AssignmentStatus": "Submitted",
        "AutoApprovalTime": datetime(2024, 1, 4, tzinfo=timezone.utc),
        "AcceptTime": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        "SubmitTime": datetime(2024, 1, 1, 12, 5, tzinfo=timezone.utc),
        "Answer": answer_document([("QuestionIdentifier", "q1"), ("FreeText", assignment_id)]),
    }
    assignment.update(fields)
    return assignment


def make_hit(hit_id, hit_type_id="TYPE1", annotation=None, **fields):
    hit = {
        "HITId": hit_id,
        "HITTypeId": hit_type_id,
        "HITGroupId": "GROUP1",
        "CreationTime": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "Title": f"Task {hit_id}",
        "Description": "Label images",
        "HITStatus": "Assignable",
        "MaxAssignments": 3,
        "Reward": "0.50",
        "AutoApprovalDelayInSeconds": 86400,
        "Expiration": datetime(2024, 2, 1, tzinfo=timezone.utc),
        "AssignmentDurationInSeconds": 600,
        "HITReviewStatus": "NotReviewed",
        "NumberOfAssignmentsPending": 0,
        "NumberOfAssignmentsAvailable": 3,
        "NumberOfAssignmentsCompleted": 0,
    }
    if annotation is not None:
        hit["RequesterAnnotation"] = annotation
    hit.update(fields)
    return hit

