import pytest


def test_contract_source_reads_checkout(deploy_module):
    code = deploy_module.contract_source(deploy_module.STAKING_FILE)
    assert "def stake_one():" in code


def test_contract_source_falls_back_to_installed_copy(deploy_module, tmp_path):
    share = tmp_path / "share"
    share.mkdir()
    (share / "con_token.py").write_text("# installed copy\n")

    code = deploy_module.contract_source(
        "con_token.py", search=(tmp_path / "missing", share)
    )
    assert code == "# installed copy\n"


def test_contract_source_missing_everywhere(deploy_module, tmp_path):
    with pytest.raises(FileNotFoundError):
        deploy_module.contract_source("con_token.py", search=(tmp_path,))


def test_deploy_wires_minter_and_tokens(suite):
    assert suite["cUSDT"].is_minter(address="con_confidential_staking")
    assert suite["staking"].get_config()["staked_token"] == "con_ceth"
