from spdx_store.error import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    SPDXStoreError,
    TypeConflictError,
)


def test_spdx_store_error():
    try:
        raise SPDXStoreError(None)
    except SPDXStoreError as basicerr:
        assert str(basicerr) == "SPDXStoreError"

    try:
        raise SPDXStoreError(None, origin="create")
    except SPDXStoreError as err:
        assert str(err) == "create: SPDXStoreError"

    err = SPDXStoreError("SPDXRef-1 already exists", origin="create")
    assert err.message == "SPDXRef-1 already exists"
    assert err.origin == "create"
    assert str(err) == "create: SPDXRef-1 already exists"
    assert str(SPDXStoreError("no origin")) == "no origin"


def test_error_kinds():
    for kind in (
        NotFoundError,
        AlreadyExistsError,
        TypeConflictError,
        InvalidInputError,
    ):
        err = kind("boom", origin="get_value")
        assert isinstance(err, SPDXStoreError)
        assert str(err) == "get_value: boom"
