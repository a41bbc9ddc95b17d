# movieapi

movieapi is a small HTTP API, built on Flask, for a movie dataset kept in
three CSV files: movie metadata, ratings and credits (cast and crew). It serves
movies, average ratings, cast and crew. Changes made through the API are
written back to the CSV files.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Configuration

`movieapi.config.get_config()` builds an `AppConfig` from the environment.
When it is called without an argument it first loads `.env` from the working
directory, if there is one; variables already set are not overridden. Each
variable may also be given with an `APP_PORT_` prefix (for example
`APP_PORT_DEBUG`), which takes precedence over the plain name.

| Variable         | `AppConfig` field | Meaning                                                   |
|------------------|-------------------|-----------------------------------------------------------|
| `APP_PORT`       | `port`            | Listen address such as `:3000`                            |
| `APP_ENV`        | `env`             | Name of the environment                                   |
| `DEBUG`          | `debug`           | Debug-level logging                                       |
| `IS_DEVELOPMENT` | `is_development`  | Coloured levels; console layout when `DEBUG` is off       |
| `MOVIES`         | `movies`          | Movies metadata CSV, relative to the working directory    |
| `RATINGS`        | `ratings`         | Ratings CSV (`userId,movieId,rating,timestamp`)           |
| `CREDITS`        | `credits`         | Credits CSV (`cast,crew,id`)                              |

Boolean variables accept `1`, `t`, `true`, `0`, `f`, `false` and their
capitalised forms; anything else raises `ValueError`.

The file `./assets/swagger.json` must exist and hold valid JSON when the
application is built. It is served at `/assets/swagger.json`, and `/docs`
shows it on a plain HTML page.

## Running

```
movieapi api
```

This listens on `APP_PORT` (an empty host means every interface; an empty
address picks a free port) and shuts down cleanly on SIGINT or SIGTERM.
Without a command, `movieapi` prints its help. The exit status is 1 if the
server fails.

## Endpoints

| Method | Path                                               | Purpose                                     |
|--------|----------------------------------------------------|---------------------------------------------|
| GET    | `/movies?page=&limit=&name=&genre=&language=`      | List movies, filtered and paged             |
| GET    | `/movies/<movieId>`                                | Get one movie                               |
| POST   | `/movies`                                          | Add a movie                                 |
| PUT    | `/movies/<movieId>`                                | Update a movie                              |
| DELETE | `/movies/<movieId>`                                | Delete a movie with its ratings and credits |
| GET    | `/ratings?page=&limit=`                            | Average rating of every movie               |
| GET    | `/ratings/movies/<movieId>/ratings`                | Average rating of one movie                 |
| POST   | `/ratings`                                         | Add a rating                                |
| PUT    | `/ratings/movies/<movieId>/user/<userId>/ratings`  | Change a user's rating                      |
| DELETE | `/ratings/movies/<movieId>/user/<userId>/ratings`  | Delete a user's rating                      |
| GET    | `/movies/<movieId>/casts`                          | Cast of a movie                             |
| PUT    | `/movies/<movieId>/casts/<castId>`                 | Update a cast member's name and character   |
| GET    | `/actor/<castId>/cast`                             | IDs of the movies an actor appears in       |
| GET    | `/movies/<movieId>/crew`                           | Crew of a movie                             |
| PUT    | `/movies/<movieId>/crew/<crewId>`                  | Update a crew member's name, department, job |
| GET    | `/metrics`                                         | Metrics in the Prometheus text format       |
| GET    | `/docs`, `/assets/swagger.json`                    | The API specification                       |

`page` defaults to 1 and `limit` to 10. The `name` filter matches any part of
the title; `genre` and `language` must match a whole genre or spoken-language
name. All filters ignore case.

Movie bodies carry `id`, `original_language`, `title`, `popularity`,
`genres`, `release_date`, `runtime`, `spoken_languages` and `status`, all as
strings except the two lists of names. `release_date` must be `YYYY-MM-DD`,
`status` one of `Released`, `Upcoming`, `Cancelled`, and every genre and
language name 5 to 50 characters long. A rating body carries `userId`,
`movieId` and `rating` as strings; the movie must exist.

Responses follow JSend: `{"status": "success", "data": ...}` on success,
`{"status": "fail", "data": ...}` for a bad page or limit, and
`{"status": "error", "message": ..., "code": ...}` otherwise, including
validation failures (status 400) and missing records (status 500, or 404
when a rating names an unknown movie).

Every request is counted in `movieapi_requests_total` by status class
(`2xx`, `3xx`, `4xx`, `5xx`). Requests other than the documentation assets
and image or text responses are logged as JSON lines on stdout.

## Using it from Python

```python
from movieapi.config import get_config
from movieapi.logger import new_root_logger
from movieapi.metrics import init_prometheus_metrics
from movieapi.routes import create_app

config = get_config()
logger = new_root_logger(config.debug, config.is_development)
app = create_app(config, logger, init_prometheus_metrics())
client = app.test_client()
print(client.get("/movies?page=1&limit=5").get_json())
```

The models can also be used on their own: `movieapi.movies.MovieModel`,
`movieapi.ratings.RatingModel`, `movieapi.cast.CastModel` and
`movieapi.crew.CrewModel` read their CSV files lazily and rewrite them on
every change. `movieapi.csvstore` holds the CSV helpers and `paginate`.

## What it does not do

- Data lives only in the CSV files; there is no database, no migrations and
  no seeding command. Each change rewrites or appends to a whole file, with
  no locking between processes.
- The movies file is written by column position (id in column 6, title in
  column 21, and so on), and rows with fewer than 23 columns are dropped
  when a movie is updated or deleted.
- `/docs` shows the specification as text; there is no interactive
  documentation browser.
- The `movieapi_movies_total` gauge is exposed but never updated.