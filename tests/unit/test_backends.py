# =============================================================================
# tests/unit/test_backends.py
# Unit Tests for LocalBackend / RemoteBackend
# =============================================================================

import pytest


class TestLocalBackend:

    def test_missing_keys_seed_the_builtin_dataset(self, local_store):
        from fabstock_core.models import Collection
        from fabstock_core.storage import LocalBackend

        loaded = LocalBackend(local_store).load_all()

        assert [i.id for i in loaded[Collection.INVENTORY]] == ["1", "2", "4", "5", "6"]
        assert [m.id for m in loaded[Collection.MACHINES]] == ["m1", "m2", "m3"]
        assert loaded[Collection.TEAM][0].email == "admin@fablab.com"

    def test_malformed_collection_degrades_alone(self, local_store):
        from fabstock_core.models import Collection
        from fabstock_core.storage import LocalBackend

        local_store.save_raw("fabstock_machines", "[[[")
        local_store.save("fabstock_team", [{"name": "no id"}])
        local_store.save("fabstock_inventory", [{"id": "x", "name": "Only item"}])

        loaded = LocalBackend(local_store).load_all()

        assert [i.id for i in loaded[Collection.INVENTORY]] == ["x"]
        assert [m.id for m in loaded[Collection.MACHINES]] == ["m1", "m2", "m3"]
        assert [m.id for m in loaded[Collection.TEAM]] == ["u1"]

    def test_empty_list_is_not_reseeded(self, local_store):
        from fabstock_core.models import Collection
        from fabstock_core.storage import LocalBackend

        local_store.save("fabstock_maintenance", [])

        assert LocalBackend(local_store).fetch(Collection.MAINTENANCE) == []

    def test_write_through_and_delete_persist_whole_collection(self, local_store, member):
        from fabstock_core.models import Collection
        from fabstock_core.storage import LocalBackend

        backend = LocalBackend(local_store)
        backend.write_through(Collection.TEAM, [member])
        assert local_store.load("fabstock_team")[0]["email"] == "camille@fablab.com"

        backend.delete_one(Collection.TEAM, member.id, [])
        assert local_store.load("fabstock_team") == []


class TestRemoteBackend:

    def _backend(self, client):
        from fabstock_core.storage import RemoteBackend, RemoteStore
        return RemoteBackend(RemoteStore(client, autostart_watchers=False))

    def test_fetch_parses_records(self, fake_supabase, member):
        from fabstock_core.models import Collection

        fake_supabase.seed("team", [member.to_dict()])

        assert self._backend(fake_supabase).fetch(Collection.TEAM) == [member]

    def test_malformed_rows_raise_remote_error(self, fake_supabase):
        from fabstock_core.errors import RemoteError
        from fabstock_core.models import Collection

        fake_supabase.seed("machines", [{"id": "m1", "status": "Exploded"}])

        with pytest.raises(RemoteError):
            self._backend(fake_supabase).fetch(Collection.MACHINES)

    def test_empty_tables_are_not_seeded(self, fake_supabase):
        from fabstock_core.models import Collection

        loaded = self._backend(fake_supabase).load_all()

        assert all(loaded[c] == [] for c in Collection)

    def test_delete_one_targets_single_row(self, fake_supabase, member, admin):
        from fabstock_core.models import Collection

        fake_supabase.seed("team", [admin.to_dict(), member.to_dict()])

        self._backend(fake_supabase).delete_one(Collection.TEAM, member.id, [admin])

        assert fake_supabase.data("team") == [admin.to_dict()]

    def test_subscribe_reports_collection(self, fake_supabase):
        from fabstock_core.models import Collection

        seen = []
        backend = self._backend(fake_supabase)
        subscription = backend.subscribe(Collection.MAINTENANCE, seen.append)
        subscription.poll_once()
        fake_supabase.seed("maintenance", [{"id": "mt1"}])
        subscription.poll_once()

        assert seen == [Collection.MAINTENANCE]
        backend.close()
        assert not subscription.active


class TestSchemaSql:

    def test_creates_every_table(self):
        from fabstock_core.storage import schema_sql

        sql = schema_sql()

        for table in ("inventory", "machines", "maintenance", "team"):
            assert f"create table if not exists {table} ( id text primary key, data jsonb not null );" in sql
            assert f"alter table {table} enable row level security;" in sql
