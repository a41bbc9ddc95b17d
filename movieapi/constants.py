"""Messages and path parameter names shared by the HTTP handlers."""

LOAD_MOVIES_ERROR = "Failed to load movies"
LOAD_RATINGS_ERROR = "Failed to load ratings of movies"
LOAD_CREDITS_ERROR = "Failed to load credits of movies"

ADD_MOVIE_ERROR = "Failed to add movie"
ADD_RATING_ERROR = "Failed to add ratings"
DELETE_RATING_ERROR = "Failed to delete rating"
DELETE_MOVIE_ERROR = "Failed to delete movie"
UPDATE_MOVIE_ERROR = "Failed to update movie"
UPDATE_RATING_ERROR = "Failed to update rating"
UPDATE_CREW_ERROR = "Failed to update crew member details"
UPDATE_CAST_ERROR = "Failed to update cast member details"

MOVIE_ID = "movieId"
USER_ID = "userId"
CAST_ID = "castId"
CREW_ID = "crewId"

ADD_RATING_SUCCESS = "Ratings added successfully"
ADD_MOVIE_SUCCESS = "Movie added successfully"
DELETE_RATING_SUCCESS = "Ratings deleted successfully"
DELETE_MOVIE_SUCCESS = "Movie deleted successfully"
UPDATE_MOVIE_SUCCESS = "Movie updated successfully"
UPDATE_RATING_SUCCESS = "Ratings updated successfully"
UPDATE_CREW_SUCCESS = "Crew Member details updated successfully"
UPDATE_CAST_SUCCESS = "Cast Member details updated successfully"

INVALID_PAGE_OR_LIMIT_ERROR = "Invalid page number or limit number"
PAGINATION_ERROR = "Pagination error"
INVALID_REQUEST_BODY = "Failed to parse request body"
VALIDATION_FAILED = "Request body is not as required"
MOVIE_CHECK_ERROR = "Movie not found"