from app.domain.members.filters import filter_members

MEMBERS = [
	{"id": "1", "name": "Asha Rao", "email": "asha@x.io", "status": "active", "member_type": "member", "teams": ["t1"], "skills": ["Rust", "Go"]},
	{"id": "2", "name": "Ben Li", "email": "ben@x.io", "status": "inactive", "member_type": "core", "teams": [], "bio": "Loves Kubernetes"},
	{"id": "3", "name": "Cara", "email": "cara@x.io", "status": "active", "member_type": "bos", "teams": ["t1", "t2"], "position": "Director"},
]


def _ids(result):
	return [m["id"] for m in result]


def test_empty_filters_keep_everything():
	assert _ids(filter_members(MEMBERS)) == ["1", "2", "3"]


def test_search_is_case_insensitive_over_text_fields():
	assert _ids(filter_members(MEMBERS, search="kubernetes")) == ["2"]
	assert _ids(filter_members(MEMBERS, search="RUST")) == ["1"]
	assert _ids(filter_members(MEMBERS, search="director")) == ["3"]


def test_filters_intersect():
	assert _ids(filter_members(MEMBERS, status="active", team="t1")) == ["1", "3"]
	assert _ids(filter_members(MEMBERS, status="active", team="t1", member_type="bos")) == ["3"]
	assert _ids(filter_members(MEMBERS, search="ben", status="active")) == []
