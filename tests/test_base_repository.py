import pytest

from inventory_core.errors import DuplicateError, NotFoundError, ValidationError
from inventory_core.models import Country
from inventory_core.pagination import ListParams, OrderBy
from inventory_core.repositories import (
    AuditRepository,
    CountryRepository,
    StateRepository,
    UniqueField,
)


@pytest.fixture
def countries(test_session):
    repo = CountryRepository(test_session)
    for name, code in [
        ("Mexico", "MX"),
        ("Canada", "CA"),
        ("United States", "US"),
        ("Guatemala", "GT"),
        ("Belize", "BZ"),
    ]:
        repo.create(name=name, code=code)
    test_session.commit()
    return repo


def test_create_and_find_one(test_session):
    repo = CountryRepository(test_session)
    country = repo.create(name="Mexico", code="MX")

    found = repo.find_one(country.id)
    assert found.name == "Mexico"
    assert found.active is True
    assert found.deleted_at is None


def test_create_accepts_camel_case_fields(test_session):
    repo = CountryRepository(test_session)
    country = repo.create(name="Mexico", code="MX")
    state = StateRepository(test_session).create(name="Jalisco", code="JAL", countryId=country.id)
    assert state.country_id == country.id


def test_create_rejects_unknown_field(test_session):
    repo = CountryRepository(test_session)
    with pytest.raises(ValidationError, match="Invalid field"):
        repo.create(name="Mexico", code="MX", population=128)


def test_find_one_missing_raises_not_found(test_session):
    repo = CountryRepository(test_session)
    with pytest.raises(NotFoundError, match="Country with id 99 not found"):
        repo.find_one(99)


def test_find_all_defaults_to_id_order(countries):
    names = [c.name for c in countries.find_all()]
    assert names == ["Mexico", "Canada", "United States", "Guatemala", "Belize"]


def test_find_all_with_filters_and_order(countries):
    result = countries.find_all(
        filters={"code": ["MX", "CA", "BZ"]},
        order_by=[OrderBy(field="name", direction="desc")],
    )
    assert [c.code for c in result] == ["MX", "CA", "BZ"]


def test_find_all_accepts_order_dicts(countries):
    result = countries.find_all(order_by=[{"field": "code"}])
    assert [c.code for c in result] == ["BZ", "CA", "GT", "MX", "US"]


def test_unknown_filter_field_raises(countries):
    with pytest.raises(ValidationError, match="Invalid filter field: population"):
        countries.find_all(filters={"population": 5})


def test_find_all_paginated(countries):
    page = countries.find_all_paginated(page=2, page_size=2)

    assert [c.code for c in page.data] == ["US", "GT"]
    meta = page.pagination
    assert meta.total_count == 5
    assert meta.total_pages == 3
    assert meta.current_page == 2
    assert meta.has_next_page is True
    assert meta.has_previous_page is True


def test_paginated_page_past_the_end_is_empty(countries):
    page = countries.find_all_paginated(page=10, page_size=2)
    assert page.data == []
    assert page.pagination.total_count == 5
    assert page.pagination.has_next_page is False


def test_page_size_is_clamped(countries):
    page = countries.find_all_paginated(page=1, page_size=10_000)
    assert page.pagination.page_size == 100


def test_search_is_case_insensitive(countries):
    result = countries.search("UNITED")
    assert [c.name for c in result] == ["United States"]


def test_search_escapes_wildcards(countries):
    assert countries.search("%") == []


def test_search_paginated(countries):
    page = countries.search_paginated("a", page=1, page_size=2)
    # Canada, United States, Guatemala
    assert page.pagination.total_count == 3
    assert len(page.data) == 2


def test_search_without_searchable_fields_raises(test_session):
    class NoSearchRepository(CountryRepository):
        searchable_fields = ()

    with pytest.raises(ValidationError, match="Search is not supported"):
        NoSearchRepository(test_session).search("mx")


def test_list_dispatches_to_search_when_term_present(countries):
    params = ListParams(page=1, page_size=10, search_term="  mex ")
    result = countries.list_paginated(params)
    assert [c.code for c in result.data] == ["MX"]

    params = ListParams(page=1, page_size=10, search_term="   ")
    assert countries.list_paginated(params).pagination.total_count == 5


def test_update(countries):
    country = countries.find_by("code", "MX")
    updated = countries.update(country.id, name="Estados Unidos Mexicanos")
    assert updated.name == "Estados Unidos Mexicanos"
    assert updated.code == "MX"


def test_update_missing_raises_not_found(countries):
    with pytest.raises(NotFoundError):
        countries.update(999, name="Nowhere")


def test_soft_delete_hides_row(countries, test_session):
    country = countries.find_by("code", "MX")
    deleted = countries.delete(country.id)

    assert deleted.deleted_at is not None
    assert countries.find_by("code", "MX") is None
    assert countries.count_all() == 4
    assert test_session.get(Country, country.id) is not None
    with pytest.raises(NotFoundError):
        countries.find_one(country.id)


def test_soft_deleted_code_can_be_reused(countries):
    country = countries.find_by("code", "MX")
    countries.delete(country.id)

    reused = countries.create(name="Mexico", code="MX")
    assert reused.id != country.id


def test_duplicate_active_code_raises(countries):
    with pytest.raises(DuplicateError):
        countries.create(name="Other Mexico", code="MX")
    countries.session.rollback()


def test_restore(countries):
    country = countries.find_by("code", "CA")
    countries.delete(country.id)

    restored = countries.restore(country.id)
    assert restored.deleted_at is None
    assert countries.find_one(country.id).code == "CA"


def test_restore_not_deleted_raises(countries):
    country = countries.find_by("code", "CA")
    with pytest.raises(NotFoundError, match="Deleted Country"):
        countries.restore(country.id)


def test_delete_many_is_all_or_nothing(countries):
    ids = [c.id for c in countries.find_all()]

    with pytest.raises(NotFoundError, match=r"\[999\]"):
        countries.delete_many([ids[0], 999])
    assert countries.count_all() == 5

    assert countries.delete_many(ids[:2]) == 2
    assert countries.count_all() == 3


def test_delete_all(countries):
    assert countries.delete_all() == 5
    assert countries.count_all() == 0


def test_hard_delete_when_soft_delete_disabled(test_session):
    repo = AuditRepository(test_session)
    audit = repo.create(endpoint="inventory:getCountry", method="GET", path="/api/v1/countries/1")
    repo.delete(audit.id)
    assert repo.count_all() == 0

    with pytest.raises(ValidationError, match="does not support restore"):
        repo.restore(audit.id)


def test_exists_by_and_find_existing_ids(countries):
    mexico = countries.find_by("code", "MX")
    assert countries.exists_by("code", "MX") is True
    assert countries.exists_by("code", "MX", exclude_id=mexico.id) is False
    assert countries.find_existing_ids([mexico.id, 999]) == [mexico.id]
    assert countries.find_existing_ids([]) == []


def test_check_uniqueness(countries):
    mexico = countries.find_by("code", "MX")

    conflicts = countries.check_uniqueness(
        [UniqueField("code", "MX"), UniqueField("name", "Peru"), UniqueField("name", None)]
    )
    assert [c.field for c in conflicts] == ["code"]
    assert countries.check_uniqueness([UniqueField("code", "MX")], exclude_id=mexico.id) == []


def test_check_uniqueness_with_scope(test_session):
    countries = CountryRepository(test_session)
    states = StateRepository(test_session)
    mexico = countries.create(name="Mexico", code="MX")
    usa = countries.create(name="United States", code="US")
    states.create(name="Durango", code="DGO", country_id=mexico.id)

    same_country = [UniqueField("name", "Durango", scope=("country_id", mexico.id))]
    other_country = [UniqueField("name", "Durango", scope=("country_id", usa.id))]
    assert len(states.check_uniqueness(same_country)) == 1
    assert states.check_uniqueness(other_country) == []


def test_validate_relation_exists(countries):
    mexico = countries.find_by("code", "MX")
    countries.validate_relation_exists(Country, mexico.id, "Country")

    countries.delete(mexico.id)
    with pytest.raises(NotFoundError, match="Country with id"):
        countries.validate_relation_exists(Country, mexico.id, "Country")


def test_transaction_rolls_back_on_error(countries):
    def work(repo):
        repo.create(name="Peru", code="PE")
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        countries.transaction(work)
    assert countries.find_by("code", "PE") is None


def test_transaction_returns_callback_result(countries):
    created = countries.transaction(lambda repo: repo.create(name="Peru", code="PE"))
    assert created.id is not None
    assert countries.find_by("code", "PE").name == "Peru"


def test_transaction_keeps_earlier_pending_work(test_session):
    countries = CountryRepository(test_session)
    countries.create(name="Chile", code="CL")

    def work(repo):
        repo.create(name="Peru", code="PE")
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        countries.transaction(work)

    assert countries.find_by("code", "CL").name == "Chile"
    assert countries.find_by("code", "PE") is None


def test_transaction_recovers_from_duplicate(countries):
    def work(repo):
        repo.create(name="Peru", code="PE")
        repo.create(name="Other Mexico", code="MX")

    with pytest.raises(DuplicateError):
        countries.transaction(work)

    assert countries.find_by("code", "PE") is None
    assert countries.create(name="Chile", code="CL").id is not None
