from .remote import GitRemote, RepoInfo, parse_repo_info

__all__ = ["GitRemote", "RepoInfo", "parse_repo_info"]
