"""
Stand-in for the analysis engine, speaking the same JSON lines on stdin/stdout.

Control actions are answered as soon as they arrive. Queries are held until
stdin closes and then answered round-robin, so responses for different ids
come out interleaved the way a busy engine would write them.

Query ids steer the output:
- "garbage*": a non-JSON line precedes the query's responses
- "empty*": each analyzed turn reports noResults instead of a result
- "deep*": a line nested too deeply to parse precedes the query's responses
"""
import json
import sys


def _result(query, turn, during):
    size = query["boardXSize"] * query["boardYSize"]
    out = {
        "id": query["id"],
        "isDuringSearch": during,
        "turnNumber": turn,
        "moveInfos": [
            {
                "move": "D4",
                "visits": 10 if during else 100,
                "winrate": 0.48,
                "scoreLead": -0.4,
                "scoreSelfplay": -0.6,
                "scoreStdev": 9.5,
                "prior": 0.3,
                "utility": -0.02,
                "lcb": 0.45,
                "utilityLcb": -0.05,
                "order": 0,
                "pv": ["D4", "Q16"],
            }
        ],
        "rootInfo": {
            "winrate": 0.48,
            "scoreLead": -0.4,
            "scoreSelfplay": -0.6,
            "utility": -0.02,
            "visits": 10 if during else 100,
            "currentPlayer": "B" if turn % 2 == 0 else "W",
        },
    }
    if query.get("includeOwnership"):
        out["ownership"] = [0.25] * size
    return out


def _responses(query):
    if query["id"].startswith("garbage"):
        yield "this is not json"
    if query["id"].startswith("deep"):
        yield '{"id":"' + query["id"] + '","x":' + "[" * 100000 + "]" * 100000 + "}"
    turns = query.get("analyzeTurns")
    if turns is None:
        turns = [len(query["moves"])]
    for turn in turns:
        if query["id"].startswith("empty"):
            yield {"id": query["id"], "isDuringSearch": False, "turnNumber": turn, "noResults": True}
            continue
        if "reportDuringSearchEvery" in query:
            yield _result(query, turn, True)
        yield _result(query, turn, False)


def _emit(item):
    line = item if isinstance(item, str) else json.dumps(item)
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def main():
    pending = []
    for line in sys.stdin:
        if not line.strip():
            continue
        req = json.loads(line)
        action = req.get("action")
        if action == "query_version":
            _emit({"action": "query_version", "git_hash": "<omitted>", "id": req["id"], "version": "1.15.3"})
        elif action == "clear_cache":
            _emit({"action": "clear_cache", "id": req["id"]})
        elif action == "terminate":
            pending = [q for q in pending if q["id"] != req["terminateId"]]
            _emit({"action": "terminate", "id": req["id"], "terminateId": req["terminateId"]})
        elif action is not None:
            _emit({"error": "Unknown action", "field": "action", "id": req.get("id")})
        else:
            pending.append(req)

    queues = [list(_responses(q)) for q in pending]
    while any(queues):
        for queue in queues:
            if queue:
                _emit(queue.pop(0))


if __name__ == "__main__":
    main()
