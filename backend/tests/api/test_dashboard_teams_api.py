import pytest


@pytest.mark.asyncio
async def test_team_listing_requires_team_mgmt(recruiter_client):
	resp = await recruiter_client.get("/api/dashboard/teams")
	assert resp.status_code == 403
	assert resp.json()["message"] == "Insufficient permissions for team management"


@pytest.mark.asyncio
async def test_create_and_list_teams_with_member_count(exec_client, pb):
	resp = await exec_client.post(
		"/api/dashboard/teams",
		json={"name": "Web", "description": "Site and tools", "category": "development", "repository_url": ""},
	)
	assert resp.status_code == 201
	team = resp.json()["team"]
	assert team["created_by"] == "rec_erin"
	pb.seed("club_members", name="Asha", email="a@x.io", teams=[team["id"]])

	teams = (await exec_client.get("/api/dashboard/teams")).json()["teams"]
	assert teams[0]["memberCount"] == 1


@pytest.mark.asyncio
async def test_delete_team_detaches_members(exec_client, pb):
	team = pb.seed("teams", name="Web", description="d", category="c")
	other = pb.seed("teams", name="AI", description="d", category="c")
	member = pb.seed("club_members", name="Asha", email="a@x.io", teams=[team["id"], other["id"]])

	resp = await exec_client.delete(f"/api/dashboard/teams/{team['id']}")
	assert resp.status_code == 200
	assert pb.collections["club_members"][member["id"]]["teams"] == [other["id"]]
	assert team["id"] not in pb.collections["teams"]


@pytest.mark.asyncio
async def test_get_unknown_team(recruiter_client):
	resp = await recruiter_client.get("/api/dashboard/teams/missing")
	assert resp.status_code == 404
	assert resp.json()["message"] == "Team not found"


@pytest.mark.asyncio
async def test_add_core_member_creates_club_record_once(exec_client, pb):
	team = pb.seed("teams", name="Web", description="d", category="c")
	core = pb.seed("nodex_team", name="Kiran", email="kiran@x.io", category="direc", title="Director")

	resp = await exec_client.post(
		f"/api/dashboard/teams/{team['id']}/members", json={"member_id": f"nodex_{core['id']}"}
	)
	assert resp.status_code == 201
	[club] = pb.records("club_members")
	assert club["member_type"] == "bos"
	assert club["teams"] == [team["id"]]

	again = await exec_client.post(
		f"/api/dashboard/teams/{team['id']}/members", json={"member_id": f"nodex_{core['id']}"}
	)
	assert again.status_code == 400
	assert again.json()["message"] == "Member is already in this team"
	assert len(pb.records("club_members")) == 1


@pytest.mark.asyncio
async def test_remove_member_requires_id(exec_client, pb):
	team = pb.seed("teams", name="Web", description="d", category="c")
	resp = await exec_client.delete(f"/api/dashboard/teams/{team['id']}/members")
	assert resp.status_code == 400
	assert resp.json()["message"] == "Member ID is required"


@pytest.mark.asyncio
async def test_remove_member_by_query(exec_client, pb):
	team = pb.seed("teams", name="Web", description="d", category="c")
	member = pb.seed("club_members", name="Asha", email="a@x.io", teams=[team["id"]])
	resp = await exec_client.delete(f"/api/dashboard/teams/{team['id']}/members", params={"member_id": member["id"]})
	assert resp.status_code == 200
	assert pb.collections["club_members"][member["id"]]["teams"] == []
