# connectx

A game server for two-player Connect-X matches. It supports both flat 2D
boards, where pieces fall down a column, and 3D boards, where pieces stack
up a stick. Players connect over a WebSocket. They create matches, join
matches and play moves by sending JSON requests.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
connectx-server
```

The server listens on port 8080 and serves WebSocket connections at `/ws`.
Each client has to send a `token` cookie. Its value identifies the player.

## Trying it out with the demo client

```
connectx-client
```

The client connects to the local server with a `token` cookie. It sends one
binary message and prints the reply.

## Protocol

Every request is a binary WebSocket frame that holds a JSON object:

```json
{"type": 2, "id": "1", "body": {"w": 7, "h": 6, "a": 4, "starts1": true, "t0": 0, "td": 0}}
```

Request types (`MessageType`):

| value | meaning            | body                                          |
|-------|--------------------|-----------------------------------------------|
| 0     | register 2D move   | `{"match_id": ..., "col": ...}`               |
| 1     | join 2D match      | `{"match_id": ...}`                           |
| 2     | create 2D match    | `{"w", "h", "a", "starts1", "t0", "td"}`      |
| 5     | register 3D move   | `{"match_id": ..., "row": ..., "col": ...}`   |
| 6     | join 3D match      | `{"match_id": ...}`                           |
| 7     | create 3D match    | `{"r", "c", "h", "a", "starts1", "t0", "td"}` |

Responses have the form `{"req_id": ..., "status": ..., "body": ...}`.
Messages the server pushes without a request, such as an opponent's move,
carry `"req_id": "-1"`. The statuses (`WsStatus`) are: OK, BAD_REQUEST,
SERVER_ERROR, UNJOINABLE, ENEMY_JOINED, ENEMY_SENT_MOVE, GAMEOVER_WON,
GAMEOVER_LOST and GAMEOVER_DRAW. Their values are 0 to 8, in that order.

Limits:

* On 2D boards, width, height and alignment must each be between 3 and 15.
* On 3D boards, rows, columns, height and alignment must each be between 3 and 10.
* The alignment must also fit the board.

## Using the game logic directly

```python
from connectx.match2d import Match2D, MatchOpts, Move

match = Match2D("p1", "p2", MatchOpts(w=7, h=6, a=4, starts1=True))
match.started = True
result = match.register_move(Move(col=0), "p1")
```

An invalid move raises `connectx.errors.InvalidMoveError`.

`MatchController2D` and `MatchController3D` keep track of matches by their
id. Use `Hub` to connect them to WebSocket connections.