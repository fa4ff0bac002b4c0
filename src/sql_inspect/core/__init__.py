"""Engine core: parameters, request cache, dispatch, batch merge and the checker."""
